import logging
from typing import Optional

from dotenv import load_dotenv
from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import FileResponse, JSONResponse, PlainTextResponse

load_dotenv()

from config import Settings, get_settings
from database import CatalogStore, seeded_store
from errors import NotFoundError, StorefrontError, ValidationError
from payments import CheckoutProvider, CheckoutSessionBuilder, StripeCheckoutProvider

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

STATUS_MESSAGE = (
    "Biba Clothing Centre API is running. Build the client and place it in "
    "client/dist or client/build to serve the frontend."
)


# ----- Utilities -----

def parse_product_id(raw: str) -> Optional[int]:
    try:
        return int(raw)
    except ValueError:
        return None


async def read_json_object(request: Request) -> dict:
    try:
        body = await request.json()
    except ValueError:
        raise ValidationError("Request body must be valid JSON")
    if body is None:
        return {}
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object")
    return body


def get_store(request: Request) -> CatalogStore:
    return request.app.state.store


def get_checkout_builder(request: Request) -> CheckoutSessionBuilder:
    return request.app.state.checkout


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[CatalogStore] = None,
    provider: Optional[CheckoutProvider] = None,
) -> FastAPI:
    settings = settings or get_settings()

    if provider is None and settings.payments_enabled:
        provider = StripeCheckoutProvider(settings.STRIPE_SECRET_KEY)
    if provider is None:
        logger.warning("STRIPE_SECRET_KEY not set. Stripe checkout will not work until you set it.")

    app = FastAPI(title="Biba Clothing Centre API")
    app.state.store = store if store is not None else seeded_store()
    app.state.checkout = CheckoutSessionBuilder(
        provider,
        currency=settings.CHECKOUT_CURRENCY,
        success_url=settings.DEFAULT_SUCCESS_URL,
        cancel_url=settings.DEFAULT_CANCEL_URL,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(StorefrontError)
    async def storefront_error_handler(request: Request, exc: StorefrontError):
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    # ----- Health -----
    @app.get("/test")
    async def test_service(store: CatalogStore = Depends(get_store),
                           checkout: CheckoutSessionBuilder = Depends(get_checkout_builder)):
        return {
            "backend": "✅ Running",
            "payments": "✅ Configured" if checkout.configured else "❌ Not Configured",
            "stripe_secret_key": "✅ Set" if settings.STRIPE_SECRET_KEY else "❌ Not Set",
            "products": len(store.list()),
        }

    # ----- Products -----
    @app.get("/api/products")
    async def list_products(store: CatalogStore = Depends(get_store)):
        return {"products": [p.model_dump() for p in store.list()]}

    @app.get("/api/products/{product_id}")
    async def get_product(product_id: str, store: CatalogStore = Depends(get_store)):
        pid = parse_product_id(product_id)
        if pid is None:
            raise ValidationError("Invalid ID format")
        return {"product": store.get(pid).model_dump()}

    # ----- Admin -----
    @app.post("/api/admin/products")
    async def create_product(request: Request, store: CatalogStore = Depends(get_store)):
        fields = await read_json_object(request)
        product = store.create(fields)
        return {"ok": True, "product": product.model_dump()}

    @app.put("/api/admin/products/{product_id}")
    async def update_product(product_id: str, request: Request, store: CatalogStore = Depends(get_store)):
        fields = await read_json_object(request)
        pid = parse_product_id(product_id)
        if pid is None:
            raise NotFoundError("product not found")
        product = store.update(pid, fields)
        return {"ok": True, "product": product.model_dump()}

    @app.delete("/api/admin/products/{product_id}")
    async def delete_product(product_id: str, store: CatalogStore = Depends(get_store)):
        pid = parse_product_id(product_id)
        if pid is not None:
            store.delete(pid)
        return {"ok": True}

    # ----- Checkout -----
    @app.post("/api/create-checkout-session")
    async def create_checkout_session(request: Request,
                                      checkout: CheckoutSessionBuilder = Depends(get_checkout_builder)):
        body = await read_json_object(request)
        # Stripe's SDK blocks, keep it off the event loop
        url = await run_in_threadpool(
            checkout.create_session,
            body.get("items"),
            body.get("successUrl"),
            body.get("cancelUrl"),
        )
        return {"url": url}

    _mount_client(app, settings)
    return app


def _mount_client(app: FastAPI, settings: Settings) -> None:
    client_path = settings.client_build_path()
    if client_path is None:
        @app.get("/", response_class=PlainTextResponse)
        async def read_root():
            return STATUS_MESSAGE
        return

    index_file = client_path / "index.html"
    root = client_path.resolve()

    @app.get("/{full_path:path}")
    async def serve_client(full_path: str):
        if full_path == "api" or full_path.startswith("api/"):
            return PlainTextResponse("API route not found", status_code=404)
        candidate = (client_path / full_path).resolve()
        if full_path and candidate.is_file() and root in candidate.parents:
            return FileResponse(candidate)
        return FileResponse(index_file)


app = create_app()


if __name__ == "__main__":
    import uvicorn
    port = get_settings().PORT
    uvicorn.run(app, host="0.0.0.0", port=port)
