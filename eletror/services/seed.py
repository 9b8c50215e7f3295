"""Built-in dataset written to an empty store on first access."""

from eletror.schemas.contacts import Contact
from eletror.schemas.inventory import Category, InventoryItem


def seed_items(now_ms: int) -> list[InventoryItem]:
    """Three starter items stamped with the seeding time."""
    return [
        InventoryItem(
            id="1",
            name="Alternador Bosch 12V 90A",
            description="Alternador recondicionado para VW Golf IV / Audi A3.",
            category=Category.ALTERNADORES,
            quantity=3,
            price=120.00,
            image="https://images.unsplash.com/photo-1486262715619-67b85e0b08d3?auto=format&fit=crop&q=80&w=400",
            updated_at=now_ms,
        ),
        InventoryItem(
            id="2",
            name="Bateria Varta E44 77Ah",
            description="Bateria Silver Dynamic, alta performance.",
            category=Category.BATERIAS,
            quantity=12,
            price=115.50,
            image="https://images.unsplash.com/photo-1623528857434-699a22f483c7?auto=format&fit=crop&q=80&w=400",
            updated_at=now_ms,
        ),
        InventoryItem(
            id="3",
            name="Motor de Arranque Valeo",
            description="Compatível com Renault Clio II 1.5 dCi.",
            category=Category.MOTORES_ARRANQUE,
            quantity=2,
            price=85.00,
            image="https://images.unsplash.com/photo-1619642751034-765dfdf7c58e?auto=format&fit=crop&q=80&w=400",
            updated_at=now_ms,
        ),
    ]


def seed_contacts() -> list[Contact]:
    return [
        Contact(
            id="1",
            type="client",
            name="Oficina Central do Porto",
            nif="501234567",
            email="compras@oficinaporto.pt",
            phone="223456789",
            address="Rua da Boavista, 123, Porto",
        ),
        Contact(
            id="2",
            type="supplier",
            name="AutoPeças Norte",
            nif="509876543",
            email="vendas@autopecasnorte.pt",
            phone="253123456",
            address="Zona Industrial de Braga",
        ),
    ]
