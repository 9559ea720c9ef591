# Generated migration for Listman core models

import uuid

import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Automation",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("code", models.SlugField(unique=True, verbose_name="code")),
                ("uuid", models.UUIDField(default=uuid.uuid4, editable=False, unique=True)),
                ("name", models.CharField(max_length=200, verbose_name="name")),
                ("description", models.TextField(blank=True, verbose_name="description")),
                ("is_active", models.BooleanField(default=False, verbose_name="active")),
                (
                    "total_users_processed",
                    models.PositiveIntegerField(default=0, verbose_name="users processed"),
                ),
                (
                    "metadata",
                    models.JSONField(blank=True, default=dict, verbose_name="metadata"),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
            ],
            options={
                "verbose_name": "automation",
                "verbose_name_plural": "automations",
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="AutomationStep",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("step_count", models.PositiveIntegerField(verbose_name="sequence number")),
                (
                    "step_type",
                    models.CharField(
                        choices=[
                            ("sendWebhook", "Send webhook"),
                            ("waitSubscriber", "Wait"),
                            ("moveSubscriber", "Move subscriber"),
                            ("removeSubscriber", "Remove subscriber"),
                            ("deleteSubscriber", "Delete subscriber"),
                            ("sendMail", "Send mail"),
                        ],
                        max_length=20,
                        verbose_name="type",
                    ),
                ),
                ("title", models.CharField(max_length=200, verbose_name="title")),
                (
                    "wait_duration",
                    models.PositiveIntegerField(blank=True, null=True, verbose_name="wait duration"),
                ),
                (
                    "wait_unit",
                    models.CharField(
                        blank=True,
                        choices=[
                            ("seconds", "Seconds"),
                            ("minutes", "Minutes"),
                            ("hours", "Hours"),
                            ("days", "Days"),
                            ("weeks", "Weeks"),
                            ("months", "Months"),
                        ],
                        max_length=10,
                        verbose_name="wait unit",
                    ),
                ),
                (
                    "automation",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="steps",
                        to="listman.automation",
                        verbose_name="automation",
                    ),
                ),
            ],
            options={
                "verbose_name": "automation step",
                "verbose_name_plural": "automation steps",
                "ordering": ["automation", "step_count"],
            },
        ),
        migrations.CreateModel(
            name="MailingList",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("code", models.SlugField(unique=True, verbose_name="code")),
                ("uuid", models.UUIDField(default=uuid.uuid4, editable=False, unique=True)),
                ("name", models.CharField(max_length=200, verbose_name="name")),
                ("description", models.TextField(blank=True, verbose_name="description")),
                ("is_active", models.BooleanField(default=True, verbose_name="active")),
                (
                    "total_subscribers",
                    models.PositiveIntegerField(default=0, verbose_name="subscribers"),
                ),
                (
                    "metadata",
                    models.JSONField(blank=True, default=dict, verbose_name="metadata"),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
                (
                    "automation",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="lists",
                        to="listman.automation",
                        verbose_name="automation",
                    ),
                ),
            ],
            options={
                "verbose_name": "mailing list",
                "verbose_name_plural": "mailing lists",
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="Contact",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("code", models.SlugField(unique=True, verbose_name="code")),
                ("uuid", models.UUIDField(default=uuid.uuid4, editable=False, unique=True)),
                ("email", models.EmailField(max_length=254, unique=True, verbose_name="email")),
                ("full_name", models.CharField(max_length=200, verbose_name="full name")),
                (
                    "is_active",
                    models.BooleanField(db_index=True, default=True, verbose_name="active"),
                ),
                ("emails_sent", models.PositiveIntegerField(default=0, verbose_name="emails sent")),
                (
                    "emails_delivered",
                    models.PositiveIntegerField(default=0, verbose_name="emails delivered"),
                ),
                (
                    "emails_opened",
                    models.PositiveIntegerField(default=0, verbose_name="emails opened"),
                ),
                (
                    "emails_clicked",
                    models.PositiveIntegerField(default=0, verbose_name="emails clicked"),
                ),
                ("open_rate", models.FloatField(default=0, verbose_name="open rate")),
                ("click_rate", models.FloatField(default=0, verbose_name="click rate")),
                (
                    "engagement_score",
                    models.FloatField(
                        default=50,
                        help_text="0-100, neutral until the first email is sent",
                        verbose_name="engagement score",
                    ),
                ),
                (
                    "created_at",
                    models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="created at"),
                ),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
                (
                    "created_by",
                    models.CharField(blank=True, max_length=255, verbose_name="created by"),
                ),
                (
                    "updated_by",
                    models.CharField(blank=True, max_length=255, verbose_name="updated by"),
                ),
            ],
            options={
                "verbose_name": "contact",
                "verbose_name_plural": "contacts",
                "ordering": ["-created_at"],
            },
        ),
        migrations.CreateModel(
            name="ListAssociation",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                (
                    "subscribed_at",
                    models.DateTimeField(
                        default=django.utils.timezone.now, verbose_name="subscribed at"
                    ),
                ),
                (
                    "source",
                    models.CharField(
                        choices=[
                            ("manual", "Manual"),
                            ("import", "Import"),
                            ("api", "API"),
                            ("form", "Form"),
                            ("automation", "Automation"),
                            ("campaign", "Campaign"),
                            ("transfer", "Transfer"),
                        ],
                        default="manual",
                        max_length=20,
                        verbose_name="source",
                    ),
                ),
                (
                    "contact",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="list_associations",
                        to="listman.contact",
                        verbose_name="contact",
                    ),
                ),
                (
                    "mailing_list",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="associations",
                        to="listman.mailinglist",
                        verbose_name="list",
                    ),
                ),
            ],
            options={
                "verbose_name": "list association",
                "verbose_name_plural": "list associations",
                "ordering": ["subscribed_at", "id"],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("contact", "mailing_list"),
                        name="listman_unique_list_association",
                    )
                ],
            },
        ),
        migrations.CreateModel(
            name="AutomationAssociation",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("step_number", models.PositiveIntegerField(default=1, verbose_name="step number")),
                (
                    "started_at",
                    models.DateTimeField(
                        default=django.utils.timezone.now, verbose_name="started at"
                    ),
                ),
                (
                    "next_step_time",
                    models.DateTimeField(blank=True, null=True, verbose_name="next step time"),
                ),
                (
                    "automation",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="associations",
                        to="listman.automation",
                        verbose_name="automation",
                    ),
                ),
                (
                    "contact",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="automation_associations",
                        to="listman.contact",
                        verbose_name="contact",
                    ),
                ),
            ],
            options={
                "verbose_name": "automation association",
                "verbose_name_plural": "automation associations",
                "ordering": ["started_at", "id"],
                "indexes": [
                    models.Index(
                        fields=["automation", "next_step_time"],
                        name="listman_autoassoc_next_idx",
                    )
                ],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("contact", "automation"),
                        name="listman_unique_automation_association",
                    )
                ],
            },
        ),
        migrations.CreateModel(
            name="ListHistory",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("subscribed_at", models.DateTimeField(verbose_name="subscribed at")),
                (
                    "unsubscribed_at",
                    models.DateTimeField(db_index=True, verbose_name="unsubscribed at"),
                ),
                (
                    "source",
                    models.CharField(
                        choices=[
                            ("manual", "Manual"),
                            ("import", "Import"),
                            ("api", "API"),
                            ("form", "Form"),
                            ("automation", "Automation"),
                            ("campaign", "Campaign"),
                            ("transfer", "Transfer"),
                        ],
                        default="manual",
                        max_length=20,
                        verbose_name="source",
                    ),
                ),
                (
                    "contact",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="list_history",
                        to="listman.contact",
                        verbose_name="contact",
                    ),
                ),
                (
                    "mailing_list",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="history",
                        to="listman.mailinglist",
                        verbose_name="list",
                    ),
                ),
            ],
            options={
                "verbose_name": "list history entry",
                "verbose_name_plural": "list history",
                "ordering": ["unsubscribed_at", "id"],
                "indexes": [
                    models.Index(
                        fields=["contact", "mailing_list"],
                        name="listman_listhist_contact_idx",
                    )
                ],
            },
        ),
        migrations.CreateModel(
            name="AutomationHistory",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("added_at", models.DateTimeField(verbose_name="added at")),
                (
                    "completed_at",
                    models.DateTimeField(blank=True, null=True, verbose_name="completed at"),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("active", "Active"),
                            ("completed", "Completed"),
                            ("paused", "Paused"),
                            ("failed", "Failed"),
                            ("cancelled", "Cancelled"),
                        ],
                        db_index=True,
                        default="active",
                        max_length=20,
                        verbose_name="status",
                    ),
                ),
                (
                    "transferred_by",
                    models.CharField(blank=True, max_length=100, verbose_name="transferred by"),
                ),
                (
                    "steps_completed",
                    models.PositiveIntegerField(default=0, verbose_name="steps completed"),
                ),
                (
                    "automation",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="history",
                        to="listman.automation",
                        verbose_name="automation",
                    ),
                ),
                (
                    "contact",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="automation_history",
                        to="listman.contact",
                        verbose_name="contact",
                    ),
                ),
                (
                    "mailing_list",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="automation_history",
                        to="listman.mailinglist",
                        verbose_name="list",
                    ),
                ),
            ],
            options={
                "verbose_name": "automation history entry",
                "verbose_name_plural": "automation history",
                "ordering": ["added_at", "id"],
                "indexes": [
                    models.Index(
                        fields=["contact", "automation", "status"],
                        name="listman_autohist_status_idx",
                    )
                ],
            },
        ),
        migrations.CreateModel(
            name="GlobalStats",
            fields=[
                (
                    "key",
                    models.CharField(
                        max_length=20, primary_key=True, serialize=False, verbose_name="key"
                    ),
                ),
                ("total_users", models.IntegerField(default=0, verbose_name="users")),
                (
                    "total_users_deleted",
                    models.PositiveIntegerField(default=0, verbose_name="users deleted"),
                ),
                ("total_mail_sent", models.PositiveIntegerField(default=0, verbose_name="mail sent")),
                ("total_lists", models.PositiveIntegerField(default=0, verbose_name="lists")),
                (
                    "total_automations",
                    models.PositiveIntegerField(default=0, verbose_name="automations"),
                ),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
            ],
            options={
                "verbose_name": "global stats",
                "verbose_name_plural": "global stats",
                "db_table": "listman_global_stats",
            },
        ),
    ]
