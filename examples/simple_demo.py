from dataclasses import dataclass
from typing import Optional

from tabula_sql import Tabula, configure_logging


@dataclass
class Client:
    id: Optional[int]
    name: str
    age: int


@dataclass
class Product:
    id: Optional[int]
    name: str
    price: int


configure_logging("INFO")

with Tabula("sqlite", "database.db") as db:
    print("Creating Client table...")
    db.create_table(Client)

    print("Creating Product table...")
    db.create_table(Product)

    client_id = db.insert(Client(None, "John Doe", 25))
    product_id = db.insert(Product(None, "Apple", 10))
    product_id2 = db.insert(Product(None, "Banana", 9))
    client_id2 = db.insert(Client(None, "Jane Doe", 25))

    # every client can buy every product
    db.create_relationship("Client", "Product", "id", "id", "MANY_TO_MANY")

    print(f"Inserted client with ID: {client_id}")
    print(f"Inserted product with ID: {product_id}")
    print(f"Inserted product with ID: {product_id2}")
    print(f"Inserted client with ID: {client_id2}")
