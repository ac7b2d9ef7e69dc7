from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ("offers", "0001_initial"),
    ]

    operations = [
        migrations.AddField(
            model_name="application",
            name="organizer_score",
            field=models.PositiveSmallIntegerField(blank=True, null=True),
        ),
        migrations.AddField(
            model_name="application",
            name="organizer_comment",
            field=models.TextField(blank=True, null=True),
        ),
        migrations.AddField(
            model_name="application",
            name="organizer_rated",
            field=models.BooleanField(default=False),
        ),
        migrations.AddConstraint(
            model_name="application",
            constraint=models.CheckConstraint(
                condition=models.Q(
                    ("organizer_score__isnull", True),
                    models.Q(("organizer_score__gte", 1), ("organizer_score__lte", 5)),
                    _connector="OR",
                ),
                name="application_organizer_score_between_1_and_5",
            ),
        ),
    ]
