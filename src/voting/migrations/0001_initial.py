import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("concerts", "0001_initial"),
        ("setlists", "0001_initial"),
        ("users", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Vote",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now)),
                (
                    "setlist_song",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="votes",
                        to="setlists.setlistsong",
                    ),
                ),
                (
                    "show",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="votes",
                        to="concerts.show",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="votes",
                        to="users.fanuser",
                    ),
                ),
            ],
            options={
                "indexes": [
                    models.Index(fields=["user", "show"], name="vote_user_show_idx"),
                    models.Index(fields=["user", "created_at"], name="vote_user_created_idx"),
                    models.Index(fields=["show", "created_at"], name="vote_show_created_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("user", "setlist_song"), name="unique_user_setlist_song_vote"
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="VoteAnalytics",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("show_votes", models.PositiveIntegerField(default=0)),
                ("daily_votes", models.PositiveIntegerField(default=0)),
                ("daily_date", models.DateField(blank=True, null=True)),
                ("last_vote_at", models.DateTimeField(blank=True, null=True)),
                (
                    "show",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="vote_analytics",
                        to="concerts.show",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="vote_analytics",
                        to="users.fanuser",
                    ),
                ),
            ],
            options={
                "constraints": [
                    models.UniqueConstraint(fields=("user", "show"), name="unique_user_show_analytics"),
                ],
            },
        ),
        migrations.CreateModel(
            name="ShowPresence",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("connection_id", models.CharField(max_length=255)),
                ("joined_at", models.DateTimeField(auto_now_add=True)),
                ("last_seen", models.DateTimeField()),
                (
                    "show",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="presences",
                        to="concerts.show",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="presences",
                        to="users.fanuser",
                    ),
                ),
            ],
            options={
                "indexes": [
                    models.Index(fields=["show", "last_seen"], name="presence_show_seen_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("show", "user", "connection_id"), name="unique_show_presence_connection"
                    ),
                ],
            },
        ),
    ]
