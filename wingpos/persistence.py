"""SQLite archive of completed sales."""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path

from wingpos.config import DB_PATH
from wingpos.models import OrderItem, Sale


@dataclass(frozen=True)
class ArchivedLine:
    """One archived order line."""

    menu_item_id: str
    name: str
    quantity: int
    unit_price: Decimal
    options: str


@dataclass(frozen=True)
class ArchivedSale:
    """Archived sale summary with copied lines."""

    sale_id: str
    order_id: str
    order_type: str
    destination: str
    payment_method: str
    total: Decimal
    timestamp: str
    lines: list[ArchivedLine]


def _connect(db_path: str | Path) -> sqlite3.Connection:
    db_file = Path(db_path)
    db_file.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(db_file)
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


def bootstrap_schema(db_path: str | Path = DB_PATH) -> None:
    """Create the archive schema if it does not already exist."""
    with _connect(db_path) as conn:
        conn.executescript(
            """
            CREATE TABLE IF NOT EXISTS sales (
                id TEXT PRIMARY KEY,
                order_id TEXT NOT NULL UNIQUE,
                order_type TEXT NOT NULL,
                destination TEXT NOT NULL,
                payment_method TEXT NOT NULL,
                total TEXT NOT NULL,
                timestamp TEXT NOT NULL
            );

            CREATE TABLE IF NOT EXISTS sale_items (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                sale_id TEXT NOT NULL,
                line_index INTEGER NOT NULL,
                menu_item_id TEXT NOT NULL,
                name TEXT NOT NULL,
                quantity INTEGER NOT NULL,
                unit_price TEXT NOT NULL,
                options TEXT NOT NULL DEFAULT '',
                FOREIGN KEY(sale_id) REFERENCES sales(id) ON DELETE CASCADE
            );

            CREATE INDEX IF NOT EXISTS idx_sale_items_sale_id_line
                ON sale_items(sale_id, line_index);

            CREATE INDEX IF NOT EXISTS idx_sales_timestamp
                ON sales(timestamp);
            """
        )


def _destination(sale: Sale, table_name: str | None = None) -> str:
    order = sale.order
    if order.delivery is not None:
        return f"{order.delivery.name} | {order.delivery.phone} | {order.delivery.address}"
    if order.to_go is not None:
        return f"{order.to_go.name} | {order.to_go.phone}".rstrip(" |")
    return table_name or order.table_id or ""


def line_options(line: OrderItem) -> str:
    """Flatten a line's options into one ``; ``-separated string."""
    parts: list[str] = []
    if line.choice:
        parts.append(line.choice)
    parts.extend(sauce.name for sauce in line.wing_sauces)
    parts.extend(sauce.name for sauce in line.fry_sauces)
    parts.extend(line.flavors)
    if line.notes:
        parts.append(line.notes)
    return "; ".join(parts)


def save_sale(sale: Sale, db_path: str | Path = DB_PATH, table_name: str | None = None) -> None:
    """Persist one completed sale and its lines in a single transaction.

    Dine-in sales are archived under ``table_name`` when given, else the table id.
    """
    order = sale.order
    with _connect(db_path) as conn:
        with conn:
            conn.execute(
                """
                INSERT INTO sales (id, order_id, order_type, destination, payment_method, total, timestamp)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    sale.id,
                    order.id,
                    order.order_type,
                    _destination(sale, table_name),
                    sale.payment_method,
                    str(sale.total),
                    sale.timestamp.isoformat(),
                ),
            )
            for idx, line in enumerate(order.items):
                conn.execute(
                    """
                    INSERT INTO sale_items (sale_id, line_index, menu_item_id, name, quantity, unit_price, options)
                    VALUES (?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        sale.id,
                        idx,
                        line.menu_item.id,
                        line.name,
                        line.quantity,
                        str(line.price),
                        line_options(line),
                    ),
                )


def load_sales(db_path: str | Path = DB_PATH) -> list[ArchivedSale]:
    """Read back every archived sale, newest first."""
    with _connect(db_path) as conn:
        sale_rows = conn.execute(
            """
            SELECT id, order_id, order_type, destination, payment_method, total, timestamp
            FROM sales ORDER BY timestamp DESC
            """
        ).fetchall()
        archived: list[ArchivedSale] = []
        for sale_id, order_id, order_type, destination, payment_method, total, timestamp in sale_rows:
            line_rows = conn.execute(
                """
                SELECT menu_item_id, name, quantity, unit_price, options
                FROM sale_items WHERE sale_id = ? ORDER BY line_index
                """,
                (sale_id,),
            ).fetchall()
            archived.append(
                ArchivedSale(
                    sale_id=sale_id,
                    order_id=order_id,
                    order_type=order_type,
                    destination=destination,
                    payment_method=payment_method,
                    total=Decimal(total),
                    timestamp=timestamp,
                    lines=[
                        ArchivedLine(
                            menu_item_id=menu_item_id,
                            name=name,
                            quantity=quantity,
                            unit_price=Decimal(unit_price),
                            options=options,
                        )
                        for menu_item_id, name, quantity, unit_price, options in line_rows
                    ],
                )
            )
    return archived
