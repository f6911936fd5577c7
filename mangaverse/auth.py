from functools import wraps

from flask import g, session

from mangaverse.errors import AuthenticationError
from mangaverse.models.user import User


def current_user():
    if "current_user" not in g:
        user_id = session.get("user_id")
        user = User.query.get(user_id) if user_id else None
        if user_id and user is None:
            session.pop("user_id", None)
        g.current_user = user
    return g.current_user


def login_user(user):
    session.clear()
    session["user_id"] = user.id
    session.permanent = True
    g.current_user = user


def logout_user():
    session.clear()
    g.pop("current_user", None)


def login_required(view_func):
    @wraps(view_func)
    def wrapped(*args, **kwargs):
        if current_user() is None:
            raise AuthenticationError("Unauthorized")
        return view_func(*args, **kwargs)
    return wrapped
