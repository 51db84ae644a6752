import asyncio
import json
from typing import Optional

from sarvis.client.request_client import RequestClient
from sarvis.core.config import SarvisConfig
from sarvis.core.exceptions import RequestFailed

DEMO_BASE_URL = "https://jsonplaceholder.typicode.com"


async def main(base_url: str = DEMO_BASE_URL, client: Optional[RequestClient] = None):

# Main pour tester le client sur une API de démo

    if client is None:
        config = SarvisConfig.from_env()
        if not config.base_url:
            config.base_url = base_url
        client = RequestClient(config)

    print(f"\n⏳ Récupération asynchrone de {client.create_api_url()}/todos/1 ...\n")

    async with client:
        try:
            todo = await client.get("/todos/1")
        except RequestFailed as e:
            print(f"❌ Requête échouée : {e}")
            return None

    print(json.dumps(todo, indent=2, ensure_ascii=False))
    return todo


# --- Lancement compatible notebooks / PyCharm ---
if __name__ == "__main__":
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        loop = None

    if loop and loop.is_running():
        import nest_asyncio
        nest_asyncio.apply()  # permet d'emboîter les loops
        asyncio.create_task(main())
    else:
        asyncio.run(main())
