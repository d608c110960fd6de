import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):
    dependencies = [
        ("orders", "0001_initial"),
        ("personalization", "0001_initial"),
    ]

    operations = [
        migrations.AddField(
            model_name="orderitem",
            name="personalization_a",
            field=models.ForeignKey(
                blank=True,
                null=True,
                on_delete=django.db.models.deletion.SET_NULL,
                related_name="+",
                to="personalization.personalization",
            ),
        ),
        migrations.AddField(
            model_name="orderitem",
            name="personalization_b",
            field=models.ForeignKey(
                blank=True,
                null=True,
                on_delete=django.db.models.deletion.SET_NULL,
                related_name="+",
                to="personalization.personalization",
            ),
        ),
    ]
