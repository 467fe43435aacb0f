from django.db import IntegrityError, transaction
from django.test import TestCase
from django.utils import timezone

from reviews.models import PullRequest, ReviewerAssignment, Team, User


class TeamModelTest(TestCase):
    def test_create_team(self):
        """Тест создания команды"""
        team = Team.objects.create(name="backend")
        self.assertEqual(team.name, "backend")
        self.assertEqual(str(team), "backend")

    def test_team_unique_name(self):
        """Тест уникальности имени команды"""
        Team.objects.create(name="backend")
        with self.assertRaises(IntegrityError):
            with transaction.atomic():
                Team.objects.create(name="backend")


class UserModelTest(TestCase):
    def setUp(self):
        self.team = Team.objects.create(name="backend")
        self.user = User.objects.create(id="user1", username="John Doe", team=self.team)

    def test_create_user(self):
        """Тест создания пользователя"""
        self.assertEqual(self.user.id, "user1")
        self.assertEqual(self.user.username, "John Doe")
        self.assertTrue(self.user.is_active)
        self.assertEqual(str(self.user), "John Doe (user1)")

    def test_user_team_relationship(self):
        """Тест связи пользователя с командой"""
        self.assertEqual(self.user.team, self.team)
        self.assertIn(self.user, self.team.members.all())


class PullRequestModelTest(TestCase):
    def setUp(self):
        self.team = Team.objects.create(name="backend")
        self.author = User.objects.create(id="author1", username="Author", team=self.team)
        self.reviewer1 = User.objects.create(id="reviewer1", username="Reviewer 1", team=self.team)
        self.reviewer2 = User.objects.create(id="reviewer2", username="Reviewer 2", team=self.team)

    def _create_pr(self, pr_id="pr-1"):
        return PullRequest.objects.create(
            id=pr_id,
            name="Test PR",
            author=self.author,
            created_at=timezone.now()
        )

    def test_create_pull_request(self):
        """Тест создания PR"""
        pr = self._create_pr()
        ReviewerAssignment.objects.create(pull_request=pr, reviewer=self.reviewer1, position=0)
        ReviewerAssignment.objects.create(pull_request=pr, reviewer=self.reviewer2, position=1)

        self.assertEqual(pr.status, PullRequest.Status.OPEN)
        self.assertFalse(pr.is_merged)
        self.assertIsNone(pr.merged_at)
        self.assertEqual(pr.reviewers.count(), 2)
        self.assertIn(self.reviewer1, pr.reviewers.all())

    def test_reviewer_ids_follow_position(self):
        """Порядок ревьюверов задается позицией, а не порядком вставки"""
        pr = self._create_pr()
        ReviewerAssignment.objects.create(pull_request=pr, reviewer=self.reviewer2, position=1)
        ReviewerAssignment.objects.create(pull_request=pr, reviewer=self.reviewer1, position=0)

        self.assertEqual(pr.reviewer_ids, ["reviewer1", "reviewer2"])

    def test_duplicate_reviewer_rejected(self):
        """Один ревьювер не может быть назначен на PR дважды"""
        pr = self._create_pr()
        ReviewerAssignment.objects.create(pull_request=pr, reviewer=self.reviewer1, position=0)

        with self.assertRaises(IntegrityError):
            with transaction.atomic():
                ReviewerAssignment.objects.create(pull_request=pr, reviewer=self.reviewer1, position=1)

    def test_merged_requires_merged_at(self):
        """MERGED без merged_at нарушает ограничение БД"""
        pr = self._create_pr()
        pr.status = PullRequest.Status.MERGED

        with self.assertRaises(IntegrityError):
            with transaction.atomic():
                pr.save()

    def test_open_forbids_merged_at(self):
        pr = self._create_pr()
        pr.merged_at = timezone.now()

        with self.assertRaises(IntegrityError):
            with transaction.atomic():
                pr.save()

    def test_pr_merge(self):
        """Тест мержа PR"""
        pr = self._create_pr()
        pr.status = PullRequest.Status.MERGED
        pr.merged_at = timezone.now()
        pr.save()

        pr.refresh_from_db()
        self.assertTrue(pr.is_merged)
        self.assertIsNotNone(pr.merged_at)
        self.assertTrue(pr.merged_at <= timezone.now())

    def test_pr_string_representation(self):
        """Тест строкового представления PR"""
        pr = self._create_pr()
        self.assertEqual(str(pr), "Test PR (pr-1)")
