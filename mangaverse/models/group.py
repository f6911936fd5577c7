from datetime import datetime

from mangaverse import db
from mangaverse.models.common import iso, new_id


GROUP_ROLES = ("owner", "editor", "translator", "artist", "contributor")


class Group(db.Model):
    __tablename__ = "groups"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    name = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=True)
    banner_url = db.Column(db.String(512), nullable=True)
    logo_url = db.Column(db.String(512), nullable=True)
    social_links = db.Column(db.JSON, nullable=True)
    owner_id = db.Column(db.String(36), db.ForeignKey("users.id"), nullable=False)
    member_count = db.Column(db.Integer, nullable=False, default=1)
    series_count = db.Column(db.Integer, nullable=False, default=0)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    owner = db.relationship("User", backref="owned_groups")
    members = db.relationship("GroupMember", back_populates="group", lazy="select", cascade="all, delete-orphan")
    series = db.relationship("Series", back_populates="group", lazy="select")

    def to_dict(self, include_members=False):
        data = {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "bannerUrl": self.banner_url,
            "logoUrl": self.logo_url,
            "socialLinks": self.social_links or {},
            "ownerId": self.owner_id,
            "memberCount": self.member_count,
            "seriesCount": self.series_count,
            "createdAt": iso(self.created_at),
            "updatedAt": iso(self.updated_at),
        }
        if include_members:
            data["members"] = [m.to_dict() for m in self.members]
        return data


class GroupMember(db.Model):
    __tablename__ = "group_members"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    group_id = db.Column(db.String(36), db.ForeignKey("groups.id"), nullable=False)
    user_id = db.Column(db.String(36), db.ForeignKey("users.id"), nullable=False)
    role = db.Column(db.String(32), nullable=False, default="contributor")
    joined_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    group = db.relationship("Group", back_populates="members")
    user = db.relationship("User", lazy="joined")

    __table_args__ = (
        db.UniqueConstraint("group_id", "user_id", name="uq_group_member_group_user"),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "groupId": self.group_id,
            "userId": self.user_id,
            "role": self.role,
            "joinedAt": iso(self.joined_at),
            "user": self.user.to_dict() if self.user else None,
        }
