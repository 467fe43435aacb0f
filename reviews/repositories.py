from django.db import IntegrityError, transaction

from .errors import AlreadyExistsError, NotAssignedError, NotFoundError, PRMergedError
from .models import PullRequest, ReviewerAssignment, Team, User


class TeamRepository:
    """
    Хранилище команд и их участников
    """

    @transaction.atomic
    def upsert_team_and_members(self, team_name: str, members: list) -> Team:
        """
        Создает команду, если ее нет, и создает/обновляет участников

        Args:
            team_name: Название команды
            members: Данные участников (user_id, username, is_active, опционально team_name)

        Returns:
            Team: Команда

        Raises:
            NotFoundError: Если команда участника не существует
        """
        team, _ = Team.objects.get_or_create(name=team_name)

        for member in members:
            member_team = team
            member_team_name = member.get('team_name', team_name)
            if member_team_name != team_name:
                member_team = Team.objects.filter(name=member_team_name).first()
                if member_team is None:
                    raise NotFoundError(
                        f"Team '{member_team_name}' not found for user '{member['user_id']}'"
                    )

            User.objects.update_or_create(
                id=member['user_id'],
                defaults={
                    'username': member['username'],
                    'is_active': member['is_active'],
                    'team': member_team,
                },
            )

        return team

    def get_team_by_name(self, team_name: str) -> Team:
        try:
            return Team.objects.prefetch_related('members').get(name=team_name)
        except Team.DoesNotExist:
            raise NotFoundError(f"Team '{team_name}' not found")

    def get_user_by_id(self, user_id: str) -> User:
        try:
            return User.objects.select_related('team').get(id=user_id)
        except User.DoesNotExist:
            raise NotFoundError(f"User '{user_id}' not found")

    @transaction.atomic
    def set_user_active(self, user_id: str, is_active: bool) -> User:
        updated = User.objects.filter(id=user_id).update(is_active=is_active)
        if not updated:
            raise NotFoundError(f"User '{user_id}' not found")

        return self.get_user_by_id(user_id)


class PullRequestRepository:
    """
    Хранилище Pull Request'ов и назначенных ревьюверов
    """

    @transaction.atomic
    def create(self, pr_id: str, name: str, author_id: str, reviewer_ids: list, created_at) -> PullRequest:
        """
        Сохраняет новый PR вместе со списком ревьюверов

        Raises:
            AlreadyExistsError: Если PR с таким ID уже есть
            NotFoundError: Если автор или ревьювер не найден
        """
        if PullRequest.objects.filter(id=pr_id).exists():
            raise AlreadyExistsError(f"PR '{pr_id}' already exists")

        # SQLite проверяет внешние ключи только при коммите
        if not User.objects.filter(id=author_id).exists():
            raise NotFoundError(f"Author '{author_id}' not found")

        try:
            with transaction.atomic():
                pr = PullRequest.objects.create(
                    id=pr_id,
                    name=name,
                    author_id=author_id,
                    status=PullRequest.Status.OPEN,
                    created_at=created_at,
                )
        except IntegrityError:
            raise AlreadyExistsError(f"PR '{pr_id}' already exists")

        self._replace_reviewers(pr, reviewer_ids)
        return pr

    def get_by_id(self, pr_id: str) -> PullRequest:
        try:
            return PullRequest.objects.select_related('author').get(id=pr_id)
        except PullRequest.DoesNotExist:
            raise NotFoundError(f"PR '{pr_id}' not found")

    @transaction.atomic
    def update(self, pr: PullRequest, reviewer_ids: list = None, expected_reviewer_ids: list = None) -> PullRequest:
        """
        Сохраняет статус PR и, если передан, новый список ревьюверов

        Запись идет под блокировкой строки PR и только пока он OPEN.

        Args:
            pr: PR с новыми значениями полей
            reviewer_ids: Новый список ревьюверов
            expected_reviewer_ids: Список ревьюверов, прочитанный перед изменением

        Raises:
            NotFoundError: Если PR был удален между чтением и записью
            PRMergedError: Если PR был смержен между чтением и записью
            NotAssignedError: Если ревьюверы PR изменились между чтением и записью
        """
        stored = PullRequest.objects.select_for_update().filter(id=pr.id).first()
        if stored is None:
            raise NotFoundError(f"PR '{pr.id}' not found for update")
        if stored.is_merged:
            raise PRMergedError(f"PR '{pr.id}' is already merged")
        if expected_reviewer_ids is not None and stored.reviewer_ids != list(expected_reviewer_ids):
            raise NotAssignedError(f"reviewers of PR '{pr.id}' changed, retry reassignment")

        PullRequest.objects.filter(id=pr.id, status=PullRequest.Status.OPEN).update(
            name=pr.name,
            status=pr.status,
            merged_at=pr.merged_at,
        )

        if reviewer_ids is not None:
            self._replace_reviewers(pr, reviewer_ids)

        return pr

    def list_by_reviewer(self, user_id: str) -> list:
        return list(
            PullRequest.objects
            .filter(assignments__reviewer=user_id)
            .order_by('-created_at')
        )

    @staticmethod
    def _replace_reviewers(pr: PullRequest, reviewer_ids: list):
        known_ids = set(User.objects.filter(id__in=reviewer_ids).values_list('id', flat=True))
        missing = [reviewer_id for reviewer_id in reviewer_ids if reviewer_id not in known_ids]
        if missing:
            raise NotFoundError(f"Reviewer '{missing[0]}' not found")

        ReviewerAssignment.objects.filter(pull_request=pr).delete()
        ReviewerAssignment.objects.bulk_create([
            ReviewerAssignment(pull_request=pr, reviewer_id=reviewer_id, position=position)
            for position, reviewer_id in enumerate(reviewer_ids)
        ])
