"""
Ordering Service — Menu catalog routes
"""
import logging
from decimal import Decimal

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ordering.db.database import get_db
from ordering.models.menu import MenuItem
from ordering.schemas.menu import MenuItemCreateRequest, MenuItemResponse

logger = logging.getLogger(__name__)
router = APIRouter(tags=["menu"])

DEFAULT_MENU: list[dict] = [
    # Appetizers
    {"name": "Gỏi Cuốn", "description": "Fresh spring rolls with shrimp, pork, vermicelli, and herbs",
     "price": "6.99", "category": "Appetizers", "image": "🥢", "rating": 4.8, "prep_time": "5-10 min"},
    {"name": "Chả Giò", "description": "Crispy egg rolls filled with pork, shrimp, and vegetables",
     "price": "7.99", "category": "Appetizers", "image": "🥟", "rating": 4.7, "prep_time": "10-12 min"},
    {"name": "Cánh Gà Chiên", "description": "Vietnamese-style crispy chicken wings with fish sauce",
     "price": "8.99", "category": "Appetizers", "image": "🍗", "rating": 4.6, "prep_time": "12-15 min"},
    # Pho
    {"name": "Phở Tái", "description": "Rare beef pho with rice noodles in aromatic beef broth",
     "price": "12.99", "category": "Pho", "image": "🍜", "rating": 4.9, "prep_time": "15-20 min"},
    {"name": "Phở Gà", "description": "Chicken pho with tender chicken breast and rice noodles",
     "price": "11.99", "category": "Pho", "image": "🍲", "rating": 4.8, "prep_time": "15-20 min"},
    {"name": "Phở Đặc Biệt", "description": "Special combo pho with rare beef, brisket, tendon, and tripe",
     "price": "14.99", "category": "Pho", "image": "🥘", "rating": 4.9, "prep_time": "15-20 min"},
    # Bun
    {"name": "Bún Thịt Nướng", "description": "Grilled pork over vermicelli with fresh herbs and fish sauce",
     "price": "12.99", "category": "Bun", "image": "🍝", "rating": 4.7, "prep_time": "15-18 min"},
    {"name": "Bún Chả Giò", "description": "Vermicelli bowl with crispy egg rolls and vegetables",
     "price": "11.99", "category": "Bun", "image": "🥗", "rating": 4.6, "prep_time": "12-15 min"},
    {"name": "Bún Bò Huế", "description": "Spicy beef noodle soup with lemongrass and thick vermicelli",
     "price": "13.99", "category": "Bun", "image": "🌶️", "rating": 4.8, "prep_time": "18-22 min"},
    # Rice Plates
    {"name": "Cơm Tấm Sườn", "description": "Broken rice with grilled pork chop, fried egg, and pickles",
     "price": "12.99", "category": "Rice Plates", "image": "🍚", "rating": 4.8, "prep_time": "15-18 min"},
    {"name": "Cơm Gà Nướng", "description": "Grilled lemongrass chicken over jasmine rice",
     "price": "11.99", "category": "Rice Plates", "image": "🍛", "rating": 4.7, "prep_time": "15-18 min"},
    {"name": "Cơm Chiên", "description": "Vietnamese fried rice with shrimp, pork, and mixed vegetables",
     "price": "10.99", "category": "Rice Plates", "image": "🍱", "rating": 4.6, "prep_time": "12-15 min"},
    # Vegan
    {"name": "Phở Chay", "description": "Vegetarian pho with tofu, mushrooms, and vegetable broth",
     "price": "11.99", "category": "Vegan", "image": "🥬", "rating": 4.7, "prep_time": "15-20 min"},
    {"name": "Bún Chay", "description": "Vermicelli with fried tofu, mushrooms, and fresh vegetables",
     "price": "10.99", "category": "Vegan", "image": "🥕", "rating": 4.6, "prep_time": "12-15 min"},
    {"name": "Cơm Chay", "description": "Vegan rice plate with lemongrass tofu and stir-fried vegetables",
     "price": "10.99", "category": "Vegan", "image": "🌱", "rating": 4.5, "prep_time": "15-18 min"},
    # Yellow Noodle Soup
    {"name": "Mì Vịt Tiềm", "description": "Egg noodle soup with braised duck and aromatic broth",
     "price": "14.99", "category": "Yellow Noodle Soup", "image": "🦆", "rating": 4.9, "prep_time": "20-25 min"},
    {"name": "Mì Hoành Thánh", "description": "Wonton noodle soup with shrimp and pork dumplings",
     "price": "12.99", "category": "Yellow Noodle Soup", "image": "🥟", "rating": 4.8, "prep_time": "18-22 min"},
    {"name": "Mì Xào Giòn", "description": "Crispy pan-fried noodles with seafood and vegetables",
     "price": "13.99", "category": "Yellow Noodle Soup", "image": "🍤", "rating": 4.7, "prep_time": "18-20 min"},
    # Boba
    {"name": "Classic Milk Tea", "description": "Traditional bubble tea with tapioca pearls",
     "price": "5.99", "category": "Boba", "image": "🧋", "rating": 4.8, "prep_time": "5-8 min"},
    {"name": "Taro Milk Tea", "description": "Creamy taro-flavored milk tea with boba",
     "price": "6.49", "category": "Boba", "image": "🟣", "rating": 4.7, "prep_time": "5-8 min"},
    {"name": "Thai Tea", "description": "Sweet and creamy Thai iced tea with boba pearls",
     "price": "5.99", "category": "Boba", "image": "🧡", "rating": 4.9, "prep_time": "5-8 min"},
]


@router.get("/menu", response_model=list[MenuItemResponse])
async def list_menu(db: AsyncSession = Depends(get_db)):
    result = await db.execute(select(MenuItem).order_by(MenuItem.category, MenuItem.name))
    return result.scalars().all()


@router.post("/menu", response_model=MenuItemResponse, status_code=status.HTTP_201_CREATED)
async def create_menu_item(payload: MenuItemCreateRequest, db: AsyncSession = Depends(get_db)):
    item = MenuItem(**payload.model_dump())
    db.add(item)
    await db.commit()
    await db.refresh(item)
    return item


@router.delete("/menu/{item_id}")
async def delete_menu_item(item_id: str, db: AsyncSession = Depends(get_db)):
    result = await db.execute(delete(MenuItem).where(MenuItem.id == item_id))
    if result.rowcount == 0:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Menu item not found.")
    await db.commit()
    return {"deleted": True, "id": item_id}


@router.post("/seed")
async def seed_menu(db: AsyncSession = Depends(get_db)):
    """Insert the default menu when the catalog is empty. Safe to call repeatedly."""
    count = (await db.execute(select(func.count()).select_from(MenuItem))).scalar_one()
    if count:
        return {"seeded": False, "count": count}

    for entry in DEFAULT_MENU:
        db.add(MenuItem(**{**entry, "price": Decimal(entry["price"])}))
    await db.commit()
    logger.info("Seeded %d menu items", len(DEFAULT_MENU))
    return {"seeded": True, "count": len(DEFAULT_MENU)}
