from datetime import datetime

from mangaverse import db
from mangaverse.models.common import iso


MAIN_CONFIG_ID = "main_config"


class SiteConfig(db.Model):
    __tablename__ = "config"

    id = db.Column(db.String(32), primary_key=True, default=MAIN_CONFIG_ID)
    setup_complete = db.Column(db.Boolean, nullable=False, default=False)
    site_name = db.Column(db.String(255), nullable=False, default="MangaVerse")
    admin_user_id = db.Column(db.String(36), nullable=True)
    installer_disabled = db.Column(db.Boolean, nullable=False, default=False)
    stripe_public_key = db.Column(db.String(255), nullable=True)
    stripe_secret_key = db.Column(db.String(255), nullable=True)
    logo_url = db.Column(db.String(512), nullable=True)
    favicon_url = db.Column(db.String(512), nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        # Secret keys never leave the server.
        return {
            "id": self.id,
            "setupComplete": self.setup_complete,
            "siteName": self.site_name,
            "adminUserId": self.admin_user_id,
            "installerDisabled": self.installer_disabled,
            "hasStripe": bool(self.stripe_secret_key),
            "stripePublicKey": self.stripe_public_key,
            "logoUrl": self.logo_url,
            "faviconUrl": self.favicon_url,
            "createdAt": iso(self.created_at),
            "updatedAt": iso(self.updated_at),
        }
