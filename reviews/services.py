import logging
import random

from django.db import models
from django.db.models import Count
from django.utils import timezone

from .errors import NoCandidateError, NotAssignedError, PRMergedError
from .models import PullRequest, Team, User
from .repositories import PullRequestRepository, TeamRepository
from .selection import select_reviewers

logger = logging.getLogger(__name__)

REVIEWERS_PER_PULL_REQUEST = 2


class TeamService:
    """
    Сервис для управления командами и пользователями
    """

    def __init__(self, teams: TeamRepository = None):
        self.teams = teams or TeamRepository()

    def create_or_update_team(self, team_name: str, members_data: list) -> Team:
        """
        Создает команду с пользователями или обновляет существующую

        Повторный вызов с теми же данными ничего не меняет, поэтому
        TEAM_EXISTS здесь не возникает.

        Args:
            team_name: Название команды
            members_data: Список данных пользователей

        Returns:
            Team: Команда с участниками

        Raises:
            NotFoundError: Если команда участника не существует
        """
        self.teams.upsert_team_and_members(team_name, members_data)
        logger.info("Team %s upserted with %d member(s)", team_name, len(members_data))

        return self.teams.get_team_by_name(team_name)

    def get_team(self, team_name: str) -> Team:
        return self.teams.get_team_by_name(team_name)


class UserService:
    """
    Сервис для управления пользователями
    """

    def __init__(self, teams: TeamRepository = None, pull_requests: PullRequestRepository = None):
        self.teams = teams or TeamRepository()
        self.pull_requests = pull_requests or PullRequestRepository()

    def set_user_active(self, user_id: str, is_active: bool) -> User:
        """
        Устанавливает флаг активности пользователя

        Уже назначенные ревью у деактивированного пользователя остаются.

        Raises:
            NotFoundError: Если пользователь не найден
        """
        user = self.teams.set_user_active(user_id, is_active)
        logger.info("User %s is_active set to %s", user_id, is_active)
        return user

    def get_review_pull_requests(self, user_id: str) -> list:
        """
        Получает PR'ы, где пользователь назначен ревьювером, новые первыми

        Raises:
            NotFoundError: Если пользователь не найден
        """
        self.teams.get_user_by_id(user_id)
        return self.pull_requests.list_by_reviewer(user_id)


class PullRequestService:
    """
    Сервис для управления Pull Request'ами
    """

    def __init__(self, pull_requests: PullRequestRepository = None, teams: TeamRepository = None,
                 rng: random.Random = None):
        self.pull_requests = pull_requests or PullRequestRepository()
        self.teams = teams or TeamRepository()
        self.rng = rng or random.Random()

    def create_pull_request(self, pr_id: str, pr_name: str, author_id: str) -> PullRequest:
        """
        Создает PR и автоматически назначает до 2 ревьюверов из команды автора

        Args:
            pr_id: ID PR
            pr_name: Название PR
            author_id: ID автора

        Returns:
            PullRequest: Созданный PR

        Raises:
            NotFoundError: Если автор или его команда не найдены
            AlreadyExistsError: Если PR уже существует
        """
        author = self.teams.get_user_by_id(author_id)
        author_team = self.teams.get_team_by_name(author.team.name)

        # Активные участники команды автора, кроме самого автора
        candidates = [
            member.id for member in author_team.members.all()
            if member.is_active and member.id != author.id
        ]
        reviewer_ids = select_reviewers(candidates, REVIEWERS_PER_PULL_REQUEST, self.rng)

        pr = self.pull_requests.create(
            pr_id=pr_id,
            name=pr_name,
            author_id=author.id,
            reviewer_ids=reviewer_ids,
            created_at=timezone.now(),
        )
        logger.info("PR %s created by %s, reviewers: %s", pr_id, author_id, reviewer_ids)

        return pr

    def merge_pull_request(self, pr_id: str) -> PullRequest:
        """
        Помечает PR как MERGED. Повторный мерж возвращает PR без изменений

        Raises:
            NotFoundError: Если PR не найден
        """
        pr = self.pull_requests.get_by_id(pr_id)

        if pr.is_merged:
            logger.debug("PR %s already merged at %s", pr_id, pr.merged_at)
            return pr

        pr.status = PullRequest.Status.MERGED
        pr.merged_at = timezone.now()
        try:
            pr = self.pull_requests.update(pr)
        except PRMergedError:
            # PR смержили параллельно, время мержа уже зафиксировано
            logger.debug("PR %s merged concurrently", pr_id)
            return self.pull_requests.get_by_id(pr_id)
        logger.info("PR %s merged", pr_id)

        return pr

    def reassign_reviewer(self, pr_id: str, old_user_id: str) -> tuple:
        """
        Переназначает конкретного ревьювера на другого из его команды

        Новый ревьювер занимает позицию старого в списке.

        Args:
            pr_id: ID PR
            old_user_id: ID старого ревьювера

        Returns:
            tuple: (PullRequest, ID нового ревьювера)

        Raises:
            NotFoundError: Если PR, пользователь или его команда не найдены
            PRMergedError: Если PR уже смержен
            NotAssignedError: Если пользователь не назначен на PR
            NoCandidateError: Если в команде нет доступной замены
        """
        pr = self.pull_requests.get_by_id(pr_id)

        # Проверяем доменные правила
        if pr.is_merged:
            raise PRMergedError('cannot reassign on merged PR')

        reviewer_ids = pr.reviewer_ids
        if old_user_id not in reviewer_ids:
            raise NotAssignedError('reviewer is not assigned to this PR')
        old_index = reviewer_ids.index(old_user_id)

        old_reviewer = self.teams.get_user_by_id(old_user_id)
        reviewer_team = self.teams.get_team_by_name(old_reviewer.team.name)

        excluded = set(reviewer_ids)
        excluded.add(pr.author_id)
        candidates = [
            member.id for member in reviewer_team.members.all()
            if member.is_active and member.id not in excluded
        ]
        if not candidates:
            raise NoCandidateError('no active replacement candidate in team')

        new_user_id = select_reviewers(candidates, 1, self.rng)[0]

        new_reviewer_ids = list(reviewer_ids)
        new_reviewer_ids[old_index] = new_user_id
        pr = self.pull_requests.update(pr, reviewer_ids=new_reviewer_ids, expected_reviewer_ids=reviewer_ids)
        logger.info("PR %s: reviewer %s replaced by %s", pr_id, old_user_id, new_user_id)

        return pr, new_user_id


class StatsService:
    """
    Сервис для сбора статистики
    """

    @classmethod
    def get_review_stats(cls) -> dict:
        """
        Returns:
            dict: Статистика по пользователям и PR
        """
        user_review_stats = (
            User.objects
            .filter(assigned_prs__isnull=False)
            .annotate(
                prs_reviewed=Count('assigned_prs'),
                open_prs_reviewed=Count(
                    'assigned_prs', filter=models.Q(assigned_prs__status=PullRequest.Status.OPEN)
                ),
                merged_prs_reviewed=Count(
                    'assigned_prs', filter=models.Q(assigned_prs__status=PullRequest.Status.MERGED)
                ),
            )
            .values('id', 'username', 'prs_reviewed', 'open_prs_reviewed', 'merged_prs_reviewed')
            .order_by('-prs_reviewed', 'id')
        )

        pr_reviewer_stats = (
            PullRequest.objects
            .annotate(
                reviewers_count=Count('assignments'),
                team_name=models.F('author__team__name'),
            )
            .values(
                'id', 'name', 'status', 'team_name',
                'reviewers_count', 'created_at', 'merged_at'
            )
            .order_by('-created_at')
        )

        return {
            'user_review_stats': list(user_review_stats),
            'pr_reviewer_stats': list(pr_reviewer_stats),
        }
