from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="LicenseOption",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "scope",
                    models.CharField(
                        choices=[("site", "Site"), ("network", "Network")], default="site", max_length=10
                    ),
                ),
                ("name", models.CharField(db_index=True, max_length=191)),
                ("value", models.TextField(blank=True, default="")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "db_table": "license_options",
                "ordering": ["scope", "name"],
            },
        ),
        migrations.AddConstraint(
            model_name="licenseoption",
            constraint=models.UniqueConstraint(fields=("scope", "name"), name="unique_license_option_per_scope"),
        ),
    ]
