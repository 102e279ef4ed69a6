from django.db import models
from django.utils import timezone


class Team(models.Model):
    name = models.CharField(max_length=100)
    city = models.CharField(max_length=100, blank=True)

    class Meta:
        app_label = "test_app"

    def __str__(self):
        return self.name


class Tag(models.Model):
    name = models.CharField(max_length=50)

    class Meta:
        app_label = "test_app"

    def __str__(self):
        return self.name


class Member(models.Model):
    STATUS_CHOICES = [
        ("active", "Active"),
        ("invited", "Invited"),
        ("archived", "Archived"),
    ]

    name = models.CharField(max_length=100)
    email = models.EmailField(blank=True, null=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default="active")
    is_admin = models.BooleanField(default=False)
    team = models.ForeignKey(
        Team, on_delete=models.SET_NULL, null=True, blank=True, related_name="members"
    )
    tags = models.ManyToManyField(Tag, blank=True, related_name="members")
    bio = models.TextField(blank=True)
    salary = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    joined_on = models.DateField(null=True, blank=True)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        app_label = "test_app"

    def __str__(self):
        return self.name
