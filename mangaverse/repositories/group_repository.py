from mangaverse import db
from mangaverse.models.group import Group, GroupMember


class GroupRepository:
    def get_all(self):
        return Group.query.order_by(Group.member_count.desc()).all()

    def get_by_id(self, group_id):
        return Group.query.get(group_id)

    def get_membership(self, group_id, user_id):
        return GroupMember.query.filter_by(group_id=group_id, user_id=user_id).first()

    def add(self, group):
        db.session.add(group)
        db.session.flush()
        return group

    def add_member(self, group_id, user_id, role):
        member = GroupMember(group_id=group_id, user_id=user_id, role=role)
        db.session.add(member)
        db.session.flush()
        return member
