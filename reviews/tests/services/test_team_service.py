from django.test import TestCase

from reviews.errors import NotFoundError
from reviews.models import Team, User
from reviews.services import TeamService


class TeamServiceTest(TestCase):
    def setUp(self):
        self.team_name = "backend"
        self.members_data = [
            {"user_id": "u1", "username": "Alice", "is_active": True},
            {"user_id": "u2", "username": "Bob", "is_active": True},
            {"user_id": "u3", "username": "Charlie", "is_active": False},
        ]
        self.service = TeamService()

    def test_create_team_with_members_success(self):
        """Тест успешного создания команды с пользователями"""
        team = self.service.create_or_update_team(self.team_name, self.members_data)

        self.assertEqual(team.name, self.team_name)
        self.assertEqual(team.members.count(), 3)

        # Проверяем созданных пользователей
        user1 = User.objects.get(id="u1")
        self.assertEqual(user1.username, "Alice")
        self.assertTrue(user1.is_active)
        self.assertEqual(user1.team, team)
        self.assertFalse(User.objects.get(id="u3").is_active)

    def test_repeated_upsert_is_idempotent(self):
        """Повторная загрузка той же команды не является ошибкой"""
        self.service.create_or_update_team(self.team_name, self.members_data)
        team = self.service.create_or_update_team(self.team_name, self.members_data)

        self.assertEqual(Team.objects.filter(name=self.team_name).count(), 1)
        self.assertEqual(team.members.count(), 3)

    def test_upsert_existing_team_without_members(self):
        self.service.create_or_update_team(self.team_name, self.members_data)

        team = self.service.create_or_update_team(self.team_name, [])

        self.assertEqual(team.members.count(), 3)

    def test_create_team_empty_members(self):
        """Тест создания команды без пользователей"""
        team = self.service.create_or_update_team("empty_team", [])

        self.assertEqual(team.name, "empty_team")
        self.assertEqual(team.members.count(), 0)

    def test_upsert_updates_existing_user(self):
        """Тест обновления существующего пользователя"""
        old_team = Team.objects.create(name="old_team")
        User.objects.create(id="u1", username="Old Name", is_active=False, team=old_team)

        team = self.service.create_or_update_team(self.team_name, self.members_data)

        user = User.objects.get(id="u1")
        self.assertEqual(user.username, "Alice")
        self.assertTrue(user.is_active)
        self.assertEqual(user.team, team)
        self.assertEqual(old_team.members.count(), 0)

    def test_member_with_missing_team(self):
        """Участник ссылается на несуществующую команду"""
        members = self.members_data + [
            {"user_id": "u9", "username": "Stranger", "is_active": True, "team_name": "ghosts"},
        ]

        with self.assertRaises(NotFoundError) as context:
            self.service.create_or_update_team(self.team_name, members)

        self.assertEqual(context.exception.code, 'NOT_FOUND')
        # Вся операция откатывается
        self.assertFalse(Team.objects.filter(name=self.team_name).exists())
        self.assertFalse(User.objects.filter(id__in=["u1", "u9"]).exists())

    def test_member_with_other_existing_team(self):
        frontend = Team.objects.create(name="frontend")
        members = [{"user_id": "u9", "username": "Visitor", "is_active": True, "team_name": "frontend"}]

        self.service.create_or_update_team(self.team_name, members)

        self.assertEqual(User.objects.get(id="u9").team, frontend)

    def test_get_team_with_members_success(self):
        """Тест успешного получения команды с пользователями"""
        self.service.create_or_update_team(self.team_name, self.members_data)

        team = self.service.get_team(self.team_name)

        self.assertEqual(team.name, self.team_name)
        self.assertEqual(team.members.count(), 3)

    def test_get_team_with_members_not_found(self):
        """Тест получения несуществующей команды"""
        with self.assertRaises(NotFoundError):
            self.service.get_team("nonexistent")
