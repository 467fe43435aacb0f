from rest_framework import serializers
from .models import Team, User, PullRequest


class TeamMemberSerializer(serializers.ModelSerializer):
    user_id = serializers.CharField(source='id')
    username = serializers.CharField()
    is_active = serializers.BooleanField()

    class Meta:
        model = User
        fields = ['user_id', 'username', 'is_active']


class TeamSerializer(serializers.ModelSerializer):
    team_name = serializers.CharField(source='name')
    members = TeamMemberSerializer(many=True, source='members.all')

    class Meta:
        model = Team
        fields = ['team_name', 'members']


class UserSerializer(serializers.ModelSerializer):
    user_id = serializers.CharField(source='id')
    username = serializers.CharField()
    team_name = serializers.CharField(source='team.name')
    is_active = serializers.BooleanField()

    class Meta:
        model = User
        fields = ['user_id', 'username', 'team_name', 'is_active']


class PullRequestSerializer(serializers.ModelSerializer):
    pull_request_id = serializers.CharField(source='id')
    pull_request_name = serializers.CharField(source='name')
    author_id = serializers.CharField()
    status = serializers.CharField()
    assigned_reviewers = serializers.ListField(source='reviewer_ids', child=serializers.CharField())
    createdAt = serializers.DateTimeField(source='created_at', format='%Y-%m-%dT%H:%M:%SZ')
    mergedAt = serializers.DateTimeField(source='merged_at', format='%Y-%m-%dT%H:%M:%SZ', allow_null=True)

    class Meta:
        model = PullRequest
        fields = [
            'pull_request_id', 'pull_request_name', 'author_id',
            'status', 'assigned_reviewers', 'createdAt', 'mergedAt'
        ]


class PullRequestShortSerializer(serializers.ModelSerializer):
    pull_request_id = serializers.CharField(source='id')
    pull_request_name = serializers.CharField(source='name')
    author_id = serializers.CharField()
    status = serializers.CharField()

    class Meta:
        model = PullRequest
        fields = ['pull_request_id', 'pull_request_name', 'author_id', 'status']


# Тела запросов

class TeamMemberInputSerializer(serializers.Serializer):
    user_id = serializers.CharField(max_length=50, trim_whitespace=False)
    username = serializers.CharField(max_length=100)
    is_active = serializers.BooleanField()


class TeamAddRequestSerializer(serializers.Serializer):
    team_name = serializers.CharField(max_length=100)
    members = TeamMemberInputSerializer(many=True, required=False)

    @staticmethod
    def validate_members(members):
        user_ids = [member['user_id'] for member in members]
        if len(user_ids) != len(set(user_ids)):
            raise serializers.ValidationError('members contain duplicate user_id')
        return members


class SetIsActiveRequestSerializer(serializers.Serializer):
    user_id = serializers.CharField(trim_whitespace=False)
    is_active = serializers.BooleanField()


class PullRequestCreateRequestSerializer(serializers.Serializer):
    pull_request_id = serializers.CharField(max_length=100, trim_whitespace=False)
    pull_request_name = serializers.CharField(max_length=200)
    author_id = serializers.CharField(trim_whitespace=False)


class PullRequestMergeRequestSerializer(serializers.Serializer):
    pull_request_id = serializers.CharField(trim_whitespace=False)


class PullRequestReassignRequestSerializer(serializers.Serializer):
    pull_request_id = serializers.CharField(trim_whitespace=False)
    old_user_id = serializers.CharField(trim_whitespace=False)


# Статистика

class UserReviewStatsSerializer(serializers.Serializer):
    id = serializers.CharField()
    username = serializers.CharField()
    prs_reviewed = serializers.IntegerField()
    open_prs_reviewed = serializers.IntegerField()
    merged_prs_reviewed = serializers.IntegerField()


class PRReviewerStatsSerializer(serializers.Serializer):
    id = serializers.CharField()
    name = serializers.CharField()
    status = serializers.CharField()
    team_name = serializers.CharField()
    reviewers_count = serializers.IntegerField()
    created_at = serializers.DateTimeField()
    merged_at = serializers.DateTimeField(allow_null=True)


class StatsSerializer(serializers.Serializer):
    user_review_stats = UserReviewStatsSerializer(many=True)
    pr_reviewer_stats = PRReviewerStatsSerializer(many=True)
