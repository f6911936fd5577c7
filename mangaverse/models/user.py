import json
from datetime import datetime

from werkzeug.security import check_password_hash, generate_password_hash

from mangaverse import db
from mangaverse.models.common import iso, new_id


class User(db.Model):
    __tablename__ = "users"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    username = db.Column(db.String(64), unique=True, nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=False)
    password_hash = db.Column(db.String(256), nullable=False)
    first_name = db.Column(db.String(120), nullable=True)
    last_name = db.Column(db.String(120), nullable=True)
    profile_image_url = db.Column(db.String(512), nullable=True)
    coin_balance = db.Column(db.Integer, nullable=False, default=0)
    is_creator = db.Column(db.Boolean, nullable=False, default=False)
    is_elite_reader = db.Column(db.Boolean, nullable=False, default=False)
    is_admin = db.Column(db.Boolean, nullable=False, default=False)
    followers_count = db.Column(db.Integer, nullable=False, default=0)
    email_verified = db.Column(db.Boolean, nullable=False, default=False)

    creator_display_name = db.Column(db.Text, nullable=True)
    creator_bio = db.Column(db.Text, nullable=True)
    creator_portfolio_url = db.Column(db.Text, nullable=True)
    creator_social_media_url = db.Column(db.Text, nullable=True)
    creator_content_types = db.Column(db.Text, nullable=True)
    creator_experience = db.Column(db.Text, nullable=True)
    creator_motivation = db.Column(db.Text, nullable=True)
    creator_application_status = db.Column(db.String(16), nullable=True)
    creator_application_date = db.Column(db.DateTime, nullable=True)

    chapters_read = db.Column(db.Integer, nullable=False, default=0)
    reading_streak = db.Column(db.Integer, nullable=False, default=0)
    last_read_at = db.Column(db.DateTime, nullable=True)
    settings = db.Column(db.Text, nullable=True)

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    def set_password(self, password):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        if not self.password_hash:
            return False
        return check_password_hash(self.password_hash, password)

    def get_settings(self):
        if not self.settings:
            return None
        try:
            return json.loads(self.settings)
        except ValueError:
            return None

    def to_dict(self, private=False):
        data = {
            "id": self.id,
            "username": self.username,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "profileImageUrl": self.profile_image_url,
            "isCreator": self.is_creator,
            "isEliteReader": self.is_elite_reader,
            "followersCount": self.followers_count,
            "creatorDisplayName": self.creator_display_name,
            "creatorBio": self.creator_bio,
            "creatorPortfolioUrl": self.creator_portfolio_url,
            "creatorSocialMediaUrl": self.creator_social_media_url,
            "creatorContentTypes": json.loads(self.creator_content_types) if self.creator_content_types else [],
            "createdAt": iso(self.created_at),
        }
        if private:
            data.update(
                {
                    "email": self.email,
                    "coinBalance": self.coin_balance,
                    "isAdmin": self.is_admin,
                    "emailVerified": self.email_verified,
                    "creatorApplicationStatus": self.creator_application_status,
                    "creatorApplicationDate": iso(self.creator_application_date),
                    "chaptersRead": self.chapters_read,
                    "readingStreak": self.reading_streak,
                    "lastReadAt": iso(self.last_read_at),
                    "updatedAt": iso(self.updated_at),
                }
            )
        return data
