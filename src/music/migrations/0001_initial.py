import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Artist",
            fields=[
                ("artist_id", models.CharField(max_length=50, primary_key=True, serialize=False)),
                ("name", models.CharField(max_length=255)),
                ("followers", models.IntegerField(default=0)),
                ("popularity", models.IntegerField(default=0)),
                ("images", models.JSONField(default=list)),
            ],
        ),
        migrations.CreateModel(
            name="Song",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=255)),
                ("catalog_id", models.CharField(blank=True, max_length=50, null=True, unique=True)),
                ("duration_ms", models.IntegerField(blank=True, null=True)),
                (
                    "artist",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="songs",
                        to="music.artist",
                    ),
                ),
            ],
            options={
                "indexes": [models.Index(fields=["artist", "name"], name="song_artist_name_idx")],
            },
        ),
    ]
