"""
Inventory Soft API entry point

    uvicorn inventory_soft.main:app
"""

from inventory_soft.serving.api import create_app

app = create_app()


if __name__ == "__main__":
    import uvicorn

    from inventory_soft.config import get_settings

    settings = get_settings()
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
