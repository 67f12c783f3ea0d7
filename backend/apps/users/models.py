from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    # username, password, is_staff, is_superuser etc. come from AbstractUser
    name = models.CharField(max_length=150, blank=True)
    email = models.EmailField(unique=True)

    def __str__(self):
        return self.username
