from __future__ import annotations

import random
from decimal import Decimal

from django.conf import settings
from django.contrib.auth import get_user_model
from django.contrib.auth.models import Group
from django.core.management.base import BaseCommand
from django.db import transaction

from modules.carts.constants import CartStatus
from modules.carts.models import Cart, CartItem
from modules.personalization.constants import FileOwnerKind, LayerKind, Side
from modules.personalization.models import Layer, Personalization, StoredFile
from modules.workflow.seeds import seed_order_process

DEMO_USERS = (
    ("admin", "admin123", None),
    ("operador", "operador123", "ROLE_OPERATOR"),
    ("repartidor", "repartidor123", "ROLE_COURIER"),
    ("supervisor", "supervisor123", "ROLE_SUPERVISOR"),
    ("cliente", "cliente123", None),
)


class Command(BaseCommand):
    help = "Seed database with the order workflow, role groups and demo carts."

    @transaction.atomic
    def handle(self, *args, **options):
        random.seed(42)
        self.stdout.write("Seeding development data...")

        process = seed_order_process()
        groups = self._seed_groups()
        users_created = self._seed_users()
        carts = self._seed_carts()

        self.stdout.write(
            self.style.SUCCESS(
                "Seed completed: "
                f"process={process.code}, "
                f"groups={groups}, "
                f"users={users_created}, "
                f"carts={carts}"
            )
        )

    def _seed_groups(self) -> int:
        for setting_name in ("ROLE_OPERATOR", "ROLE_COURIER", "ROLE_SUPERVISOR"):
            Group.objects.get_or_create(name=getattr(settings, setting_name))
        return 3

    def _seed_users(self) -> int:
        User = get_user_model()
        created = 0
        for username, password, role in DEMO_USERS:
            if User.objects.filter(username=username).exists():
                continue
            if role is None and username == "admin":
                User.objects.create_superuser(username, password=password)
            else:
                user = User.objects.create_user(username, password=password)
                if role is not None:
                    user.groups.add(Group.objects.get(name=getattr(settings, role)))
            created += 1
        return created

    def _seed_carts(self) -> int:
        """One open cart per demo customer id, with a personalized first line."""
        self.stdout.write("Creating carts...")
        created = 0
        for user_id in (7, 8, 9):
            if Cart.objects.filter(user_id=user_id, status=CartStatus.OPEN).exists():
                continue
            cart = Cart.objects.create(user_id=user_id)
            lines = [
                CartItem.objects.create(
                    cart=cart,
                    product_id=random.randint(1, 40),
                    quantity=random.randint(1, 3),
                    unit_price=Decimal(random.choice(["50.00", "75.50", "120.00"])),
                )
                for _ in range(random.randint(1, 3))
            ]
            self._personalize(lines[0])
            created += 1
        return created

    def _personalize(self, item: CartItem) -> None:
        for side in (Side.A, Side.B):
            personalization = Personalization.objects.create(cart_item=item, side=side)
            photo = StoredFile.objects.create(
                path=f"uploads/demo/{item.id}-{side}.jpg",
                owner_kind=FileOwnerKind.PERSONALIZATION,
                owner_id=str(personalization.id),
            )
            Layer.objects.create(
                personalization=personalization,
                kind=LayerKind.PHOTO,
                z_index=1,
                file=photo,
            )
            Layer.objects.create(
                personalization=personalization,
                kind=LayerKind.TEXT,
                z_index=2,
                text="Feliz cumpleaños",
                font="Roboto",
                color="#333333",
            )
