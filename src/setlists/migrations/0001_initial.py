import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("concerts", "0001_initial"),
        ("music", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Setlist",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "kind",
                    models.CharField(
                        choices=[("main", "Main set"), ("encore", "Encore")],
                        default="main",
                        max_length=10,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "show",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="setlists",
                        to="concerts.show",
                    ),
                ),
            ],
            options={
                "constraints": [
                    models.UniqueConstraint(fields=("show", "kind"), name="unique_show_setlist_kind"),
                ],
            },
        ),
        migrations.CreateModel(
            name="SetlistSong",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("position", models.PositiveIntegerField(default=0)),
                ("vote_count", models.PositiveIntegerField(default=0)),
                (
                    "setlist",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="songs",
                        to="setlists.setlist",
                    ),
                ),
                (
                    "song",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="setlist_entries",
                        to="music.song",
                    ),
                ),
            ],
            options={
                "indexes": [
                    models.Index(fields=["setlist", "-vote_count"], name="setlistsong_ranking_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(fields=("setlist", "song"), name="unique_setlist_song"),
                ],
            },
        ),
        migrations.CreateModel(
            name="PlayedSetlist",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("provider_setlist_id", models.CharField(blank=True, max_length=100)),
                ("imported_at", models.DateTimeField(auto_now_add=True)),
                (
                    "show",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="played_setlist",
                        to="concerts.show",
                    ),
                ),
            ],
        ),
        migrations.CreateModel(
            name="PlayedSetlistSong",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=255)),
                ("position", models.PositiveIntegerField()),
                (
                    "played_setlist",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="songs",
                        to="setlists.playedsetlist",
                    ),
                ),
                (
                    "song",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        to="music.song",
                    ),
                ),
            ],
            options={
                "ordering": ["position"],
            },
        ),
    ]
