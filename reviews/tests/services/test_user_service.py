from datetime import timedelta

from django.test import TestCase
from django.utils import timezone

from reviews.errors import NotFoundError
from reviews.models import PullRequest, Team, User
from reviews.repositories import PullRequestRepository
from reviews.services import UserService


class UserServiceTest(TestCase):
    def setUp(self):
        # Создаем команду
        self.team = Team.objects.create(name="backend")

        self.user1 = User.objects.create(id="u1", username="Alice", is_active=True, team=self.team)
        self.user2 = User.objects.create(id="u2", username="Bob", is_active=True, team=self.team)

        # Создаем PR где u2 - ревьювер
        self.now = timezone.now()
        self.pull_requests = PullRequestRepository()
        self.pull_requests.create("pr-1", "Test PR", "u1", ["u2"], self.now - timedelta(hours=1))

        self.service = UserService()

    def test_set_user_active_success(self):
        """Тест успешного изменения активности пользователя"""
        user = self.service.set_user_active("u1", False)

        self.assertEqual(user.id, "u1")
        self.assertFalse(user.is_active)
        self.assertEqual(user.team, self.team)

        # Проверяем что данные сохранились в БД
        self.assertFalse(User.objects.get(id="u1").is_active)

    def test_set_user_active_not_found(self):
        """Тест изменения активности несуществующего пользователя"""
        with self.assertRaises(NotFoundError):
            self.service.set_user_active("nonexistent", True)

    def test_deactivation_keeps_assignments(self):
        """Деактивация не снимает уже назначенные ревью"""
        self.service.set_user_active("u2", False)

        self.assertEqual(PullRequest.objects.get(id="pr-1").reviewer_ids, ["u2"])
        self.assertEqual(len(self.service.get_review_pull_requests("u2")), 1)

    def test_get_review_pull_requests_success(self):
        """Тест успешного получения PR пользователя как ревьювера"""
        assigned_prs = self.service.get_review_pull_requests("u2")

        self.assertEqual(len(assigned_prs), 1)
        self.assertEqual(assigned_prs[0].id, "pr-1")
        self.assertEqual(assigned_prs[0].author_id, "u1")

    def test_get_review_pull_requests_empty(self):
        """Тест получения PR когда пользователь не ревьювер"""
        assigned_prs = self.service.get_review_pull_requests("u1")

        self.assertEqual(len(assigned_prs), 0)

    def test_get_review_pull_requests_not_found(self):
        """Тест получения PR несуществующего пользователя"""
        with self.assertRaises(NotFoundError):
            self.service.get_review_pull_requests("nonexistent")

    def test_get_review_pull_requests_newest_first(self):
        """Тест получения нескольких PR пользователя, новые первыми"""
        self.pull_requests.create("pr-2", "Newer PR", "u1", ["u2"], self.now)
        self.pull_requests.create("pr-0", "Oldest PR", "u1", ["u2"], self.now - timedelta(days=1))

        assigned_prs = self.service.get_review_pull_requests("u2")

        self.assertEqual([pr.id for pr in assigned_prs], ["pr-2", "pr-1", "pr-0"])
