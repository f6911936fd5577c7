from mangaverse import db
from mangaverse.errors import NotFoundError, ValidationError
from mangaverse.models.group import Group
from mangaverse.repositories.group_repository import GroupRepository


class GroupService:
    def __init__(self, group_repository=None):
        self.group_repository = group_repository or GroupRepository()

    def list_groups(self):
        return self.group_repository.get_all()

    def get_group(self, group_id):
        group = self.group_repository.get_by_id(group_id)
        if group is None:
            raise NotFoundError("Group not found")
        return group

    def create_group(self, user, data):
        name = (data.get("name") or "").strip()
        if not name:
            raise ValidationError("Group name is required")
        social_links = data.get("socialLinks")
        if social_links is not None and not isinstance(social_links, dict):
            raise ValidationError("socialLinks must be an object")
        group = Group(
            name=name,
            description=(data.get("description") or "").strip() or None,
            banner_url=data.get("bannerUrl") or None,
            logo_url=data.get("logoUrl") or None,
            social_links=social_links,
            owner_id=user.id,
            member_count=1,
        )
        self.group_repository.add(group)
        self.group_repository.add_member(group.id, user.id, "owner")
        db.session.commit()
        return group
