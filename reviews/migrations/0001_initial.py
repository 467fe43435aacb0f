import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Team',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=100, unique=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
            ],
            options={
                'db_table': 'teams',
            },
        ),
        migrations.CreateModel(
            name='User',
            fields=[
                ('id', models.CharField(max_length=50, primary_key=True, serialize=False)),
                ('username', models.CharField(max_length=100)),
                ('is_active', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('team', models.ForeignKey(
                    on_delete=django.db.models.deletion.PROTECT,
                    related_name='members',
                    to='reviews.team',
                )),
            ],
            options={
                'db_table': 'users',
            },
        ),
        migrations.CreateModel(
            name='PullRequest',
            fields=[
                ('id', models.CharField(max_length=100, primary_key=True, serialize=False)),
                ('name', models.CharField(max_length=200)),
                ('status', models.CharField(
                    choices=[('OPEN', 'Open'), ('MERGED', 'Merged')],
                    default='OPEN',
                    max_length=10,
                )),
                ('created_at', models.DateTimeField()),
                ('merged_at', models.DateTimeField(blank=True, null=True)),
                ('author', models.ForeignKey(
                    on_delete=django.db.models.deletion.PROTECT,
                    related_name='authored_prs',
                    to='reviews.user',
                )),
            ],
            options={
                'db_table': 'pull_requests',
            },
        ),
        migrations.CreateModel(
            name='ReviewerAssignment',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('position', models.PositiveSmallIntegerField()),
                ('pull_request', models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name='assignments',
                    to='reviews.pullrequest',
                )),
                ('reviewer', models.ForeignKey(
                    on_delete=django.db.models.deletion.PROTECT,
                    related_name='review_assignments',
                    to='reviews.user',
                )),
            ],
            options={
                'db_table': 'pull_request_reviewers',
                'ordering': ['position'],
            },
        ),
        migrations.AddField(
            model_name='pullrequest',
            name='reviewers',
            field=models.ManyToManyField(
                blank=True,
                related_name='assigned_prs',
                through='reviews.ReviewerAssignment',
                to='reviews.user',
            ),
        ),
        migrations.AddConstraint(
            model_name='pullrequest',
            constraint=models.CheckConstraint(
                condition=(
                    models.Q(('status', 'OPEN'), ('merged_at__isnull', True))
                    | models.Q(('status', 'MERGED'), ('merged_at__isnull', False))
                ),
                name='pull_request_merged_at_matches_status',
            ),
        ),
        migrations.AddConstraint(
            model_name='reviewerassignment',
            constraint=models.UniqueConstraint(
                fields=('pull_request', 'reviewer'),
                name='unique_reviewer_per_pull_request',
            ),
        ),
        migrations.AddConstraint(
            model_name='reviewerassignment',
            constraint=models.UniqueConstraint(
                fields=('pull_request', 'position'),
                name='unique_position_per_pull_request',
            ),
        ),
    ]
