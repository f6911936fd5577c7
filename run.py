import click

from mangaverse import create_app, db
from mangaverse.services.install_manager import InstallManager


app = create_app()


@app.cli.command("init-db")
def init_db():
    with app.app_context():
        db.create_all()

@app.cli.command("drop-db")
def drop_db():
    with app.app_context():
        db.drop_all()

@app.cli.command("reset-db")
def reset_db():
    with app.app_context():
        db.drop_all()
        db.create_all()

@app.cli.command("install")
@click.option("--username", required=True, help="Administrator username.")
@click.option("--password", required=True, prompt=True, hide_input=True, help="Administrator password.")
@click.option("--email", default=None, help="Administrator email.")
@click.option("--site-name", default=None, help="Site name shown in the UI.")
@click.option("--database-url", default=None, help="Defaults to the configured database.")
def install(username, password, email, site_name, database_url):
    with app.app_context():
        manager = InstallManager(
            app_engine=db.engine,
            app_database_url=app.config["SQLALCHEMY_DATABASE_URI"],
            starting_coins=app.config["ADMIN_STARTING_COINS"],
            default_site_name=app.config["DEFAULT_SITE_NAME"],
        )
        try:
            result = manager.perform_full_installation(
                {
                    "databaseUrl": database_url or app.config["SQLALCHEMY_DATABASE_URI"],
                    "adminUsername": username,
                    "adminPassword": password,
                    "adminEmail": email,
                    "siteName": site_name,
                }
            )
        finally:
            manager.close()
    if not result["success"]:
        raise click.ClickException(result["error"])
    click.echo(f"Installation complete, admin user id {result['adminUserId']}")


if __name__ == "__main__":
    app.run(host="0.0.0.0", port=5000)
