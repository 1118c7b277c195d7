# clinic/management/commands/ensure_demo_users.py
from django.core.management.base import BaseCommand
from django.contrib.auth.hashers import make_password
from clinic.models import User

DEMO_SET = [
    ("admin@medixone.com", "admin123", User.Role.ADMIN, "Admin", "Usuario"),
    ("doctor@medixone.com", "password123", User.Role.DOCTOR, "José", "Martínez"),
    ("nurse@medixone.com", "password123", User.Role.NURSE, "Laura", "Gómez"),
    ("patient@medixone.com", "password123", User.Role.PATIENT, "María", "González"),
]


class Command(BaseCommand):
    help = "Ensure the demo accounts listed on the login page exist (idempotent)."

    def handle(self, *args, **opts):
        for email, password, role, first_name, last_name in DEMO_SET:
            u, created = User.objects.get_or_create(
                username=email,
                defaults={
                    "email": email,
                    "role": role,
                    "first_name": first_name,
                    "last_name": last_name,
                    "password": make_password(password),
                    "is_active": True,
                    "is_staff": role == User.Role.ADMIN,
                },
            )
            if not created:
                # Reset password, role and activation on existing rows
                u.password = make_password(password)
                u.role = role
                u.is_active = True
                u.save(update_fields=["password", "role", "is_active"])
            self.stdout.write(self.style.SUCCESS(f"ok: {email} ({role})"))
        self.stdout.write(self.style.SUCCESS("All demo users ensured."))
