# tests/test_export.py
from storefront.domain.schemas import Order, OrderLine
from storefront.services.export_service import orders_to_csv


def test_orders_to_csv():
    orders = [
        Order(
            id=1700000000000,
            date="3/7/2026, 2:05:09 PM",
            user="alice",
            items=[OrderLine(name="Item 1.3", quantity=3, price="12.5"), OrderLine(name="Mug", quantity=1, price=4)],
            total="41.50",
            status="shipped",
        ),
        Order(id=2, date="3/8/2026, 9:00:00 AM", total="0"),
    ]

    lines = orders_to_csv(orders).splitlines()

    assert lines[0] == '"ID","Date","User","Status","Items","Total"'
    assert lines[1] == (
        '"1700000000000","3/7/2026, 2:05:09 PM","alice","shipped","3 x Item 1.3; 1 x Mug","41.50"'
    )
    assert lines[2] == '"2","3/8/2026, 9:00:00 AM","","pending","","0.00"'
