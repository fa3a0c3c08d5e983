from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ("relay", "0001_initial"),
    ]

    operations = [
        migrations.AddConstraint(
            model_name="telemetryevent",
            constraint=models.UniqueConstraint(fields=("device_id", "server_ts"), name="unique_event_server_ts"),
        ),
    ]
