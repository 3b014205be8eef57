# storefront/services/cart_service.py
from decimal import Decimal
from typing import List

from storefront.data.store import StoreAdapter
from storefront.domain.errors import ValidationError
from storefront.domain.money import format_money
from storefront.domain.schemas import CartLine, CartLineOut, CartSummary, Category
from storefront.repos.cart_repo import CartRepo
from storefront.services.catalog_service import find_item
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

PAYMENT_METHOD = "Cash on Delivery"


def coerce_quantity(value) -> int:
    """Positive int, anything non-numeric or < 1 becomes 1."""
    if isinstance(value, bool):
        return 1
    try:
        qty = int(float(value))
    except (TypeError, ValueError, OverflowError):
        return 1
    return qty if qty > 0 else 1


def summarize(lines: List[CartLine], categories: List[Category]) -> CartSummary:
    """
    Liczba sztuk i suma koszyka. Linie wskazujace na usuniete
    kategorie/produkty sa pomijane (katalog mogl sie zmienic).
    """
    count = 0
    total = Decimal("0.00")
    out = []

    for line in lines:
        item = find_item(categories, line.category_id, line.item_id)
        if item is None:
            continue

        subtotal = item.unit_price * line.quantity
        count += line.quantity
        total += subtotal
        out.append(
            CartLineOut(
                category_id=line.category_id,
                item_id=line.item_id,
                name=item.name,
                price=item.price,
                quantity=line.quantity,
                subtotal=format_money(subtotal),
            )
        )

    return CartSummary(
        count=count,
        total=format_money(total),
        lines=out,
        payment_method=PAYMENT_METHOD,
    )


class CartService:
    """
    Koszyk: co najwyzej jedna linia na (categoryId, itemId), quantity >= 1.
    Zapis po kazdej mutacji.
    """

    def __init__(self, store: StoreAdapter):
        self.repo = CartRepo(store)

    #query
    async def get_lines(self) -> List[CartLine]:
        return await self.repo.get_lines()

    async def summarize(self, categories: List[Category]) -> CartSummary:
        return summarize(await self.repo.get_lines(), categories)

    #commands
    async def add_to_cart(self, category_id: int, item_id: int, qty=1) -> List[CartLine]:
        quantity = coerce_quantity(qty)
        lines = await self.repo.get_lines()

        existing = next(
            (l for l in lines if l.category_id == category_id and l.item_id == item_id),
            None,
        )
        if existing:
            logger.info(
                f"Item {category_id}.{item_id} already in cart, quantity "
                f"{existing.quantity} -> {existing.quantity + quantity}"
            )
            existing.quantity += quantity
        else:
            logger.info(f"Adding item {category_id}.{item_id} x{quantity} to cart")
            lines.append(CartLine(category_id=category_id, item_id=item_id, quantity=quantity))

        await self.repo.save_lines(lines)
        return lines

    async def adjust_quantity(self, category_id: int, item_id: int, delta: int) -> List[CartLine]:
        """delta is +1 or -1; a line that drops to 0 is removed."""
        if delta not in (1, -1):
            raise ValidationError("Quantity can only be increased or decreased by one")

        lines = await self.repo.get_lines()
        idx = next(
            (i for i, l in enumerate(lines) if l.category_id == category_id and l.item_id == item_id),
            None,
        )
        if idx is None:
            return lines

        new_qty = lines[idx].quantity + delta
        if new_qty <= 0:
            lines.pop(idx)
        else:
            lines[idx].quantity = new_qty

        await self.repo.save_lines(lines)
        return lines

    async def remove_line(self, category_id: int, item_id: int) -> List[CartLine]:
        lines = await self.repo.get_lines()
        remaining = [
            l for l in lines if not (l.category_id == category_id and l.item_id == item_id)
        ]
        if len(remaining) == len(lines):
            return lines

        logger.info(f"Removing item {category_id}.{item_id} from cart")
        await self.repo.save_lines(remaining)
        return remaining

    async def clear(self) -> None:
        await self.repo.clear()
