"""
Ordering Service — Bulk-assign menu photos by exact item name.

Usage:
    python -m ordering.scripts.update_menu_images
"""
import asyncio
import logging

from sqlalchemy import update

from ordering.db.database import AsyncSessionLocal, engine
from ordering.models.menu import MenuItem

logger = logging.getLogger(__name__)

IMAGE_DIR = "/images/menu"

IMAGE_MAPPING: dict[str, str] = {
    # Pho
    "Phở Đặc Biệt": "pho-dac-biet.jpg",
    "Phở Tái": "pho-tai.jpg",
    "Phở Gà": "pho-ga.jpg",
    "Phở Chay": "pho-chay.jpg",
    # Bun
    "Bún Bò Huế": "bun-bo-hue.jpg",
    "Bún Thịt Nướng": "bun-thit-nuong.jpg",
    "Bún Chả Giò": "bun-cha-gio.jpg",
    "Bún Chay": "bun-chay.jpg",
    # Com
    "Cơm Tấm Sườn": "com-tam-suon.jpg",
    "Cơm Gà Nướng": "com-ga-nuong.jpg",
    "Cơm Chiên": "com-chien.jpg",
    "Cơm Chay": "com-chay.jpg",
    # Mi
    "Mì Xào Giòn": "mi-xao-gion.jpg",
    "Mì Hoành Thánh": "mi-hoanh-thanh.jpg",
    "Mì Vịt Tiềm": "mi-viet-tiem.jpg",
    # Appetizers
    "Chả Giò": "cha-gio.jpg",
    "Gỏi Cuốn": "goi-cuon.jpg",
    "Cánh Gà Chiên": "canh-ga-chien.jpg",
    # Boba
    "Classic Milk Tea": "classic-milk-tea.jpg",
    "Taro Milk Tea": "taro-milk-tea.jpg",
    "Thai Tea": "thai-tea.jpg",
}


async def update_menu_images(mapping: dict[str, str] = IMAGE_MAPPING) -> tuple[int, list[str]]:
    """Return (rows updated, names with no matching item)."""
    updated = 0
    missing: list[str] = []
    async with AsyncSessionLocal() as session:
        for name, filename in mapping.items():
            result = await session.execute(
                update(MenuItem).where(MenuItem.name == name).values(image=f"{IMAGE_DIR}/{filename}")
            )
            if result.rowcount:
                updated += result.rowcount
            else:
                missing.append(name)
        await session.commit()
    return updated, missing


async def _main() -> None:
    try:
        updated, missing = await update_menu_images()
    finally:
        await engine.dispose()
    logger.info("Updated %d menu images", updated)
    for name in missing:
        logger.warning("No menu item named '%s'", name)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    asyncio.run(_main())
