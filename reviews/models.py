from django.db import models


class Team(models.Model):
    name = models.CharField(max_length=100, unique=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return self.name

    class Meta:
        db_table = 'teams'


class User(models.Model):
    id = models.CharField(max_length=50, primary_key=True)
    username = models.CharField(max_length=100)
    team = models.ForeignKey(Team, on_delete=models.PROTECT, related_name='members')
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.username} ({self.id})"

    class Meta:
        db_table = 'users'


class PullRequest(models.Model):
    class Status(models.TextChoices):
        OPEN = 'OPEN', 'Open'
        MERGED = 'MERGED', 'Merged'

    id = models.CharField(max_length=100, primary_key=True)
    name = models.CharField(max_length=200)
    author = models.ForeignKey(User, on_delete=models.PROTECT, related_name='authored_prs')
    status = models.CharField(max_length=10, choices=Status, default=Status.OPEN)
    reviewers = models.ManyToManyField(
        User,
        through='ReviewerAssignment',
        related_name='assigned_prs',
        blank=True,
    )
    created_at = models.DateTimeField()
    merged_at = models.DateTimeField(null=True, blank=True)

    @property
    def is_merged(self):
        return self.status == self.Status.MERGED

    @property
    def reviewer_ids(self):
        """Assigned reviewer ids in assignment order."""
        return [
            assignment.reviewer_id
            for assignment in self.assignments.order_by('position')
        ]

    def __str__(self):
        return f"{self.name} ({self.id})"

    class Meta:
        db_table = 'pull_requests'
        constraints = [
            models.CheckConstraint(
                condition=(
                    models.Q(status='OPEN', merged_at__isnull=True)
                    | models.Q(status='MERGED', merged_at__isnull=False)
                ),
                name='pull_request_merged_at_matches_status',
            ),
        ]


class ReviewerAssignment(models.Model):
    pull_request = models.ForeignKey(PullRequest, on_delete=models.CASCADE, related_name='assignments')
    reviewer = models.ForeignKey(User, on_delete=models.PROTECT, related_name='review_assignments')
    position = models.PositiveSmallIntegerField()

    def __str__(self):
        return f"{self.reviewer_id} -> {self.pull_request_id} [{self.position}]"

    class Meta:
        db_table = 'pull_request_reviewers'
        ordering = ['position']
        constraints = [
            models.UniqueConstraint(
                fields=['pull_request', 'reviewer'],
                name='unique_reviewer_per_pull_request',
            ),
            models.UniqueConstraint(
                fields=['pull_request', 'position'],
                name='unique_position_per_pull_request',
            ),
        ]
