import django.db.models.deletion
import uuid6
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("products", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="StockMovement",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid6.uuid7,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("quantity", models.IntegerField()),
                (
                    "movement_type",
                    models.CharField(
                        choices=[("RESERVE", "Reserve"), ("RELEASE", "Release")],
                        max_length=10,
                    ),
                ),
                (
                    "reference",
                    models.CharField(blank=True, default="", max_length=50),
                ),
                ("stock_after", models.PositiveIntegerField()),
                (
                    "product",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="stock_movements",
                        to="products.product",
                    ),
                ),
            ],
            options={
                "db_table": "stock_movements",
                "ordering": ["created_at"],
                "indexes": [
                    models.Index(fields=["reference"], name="stock_mov_reference_idx"),
                    models.Index(
                        fields=["product", "created_at"],
                        name="stock_mov_product_idx",
                    ),
                ],
            },
        ),
    ]
