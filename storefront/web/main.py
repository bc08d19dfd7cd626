from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional
from urllib.parse import urlencode

from fastapi import FastAPI, Form, HTTPException, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates

from storefront.config import settings
from storefront.constants import MSG_BUSY
from storefront.models import Product
from storefront.services.card import build_card_view
from storefront.services.cart import InMemoryCartStore
from storefront.services.notifications import FlashNotifier
from storefront.services.pricing import PriceResolver
from storefront.services.products import find_product, list_products
from storefront.services.remote import SimulatedAddToCart
from storefront.services.stock import OddIdStockPolicy
from storefront.services.workflow import CartSubmissionWorkflow


BASE_DIR = Path(__file__).resolve().parent
TEMPLATES_DIR = BASE_DIR / "templates"
STATIC_DIR = BASE_DIR / "static"

app = FastAPI(title="Storefront")

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

if STATIC_DIR.exists():
    app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")

CART = InMemoryCartStore()
PRICES = PriceResolver(settings)
STOCK = OddIdStockPolicy()

# one workflow per product card
WORKFLOWS: Dict[int, CartSubmissionWorkflow] = {}


def _workflow_for(product: Product) -> CartSubmissionWorkflow:
    wf = WORKFLOWS.get(product.id)
    if wf is None:
        wf = CartSubmissionWorkflow(
            product,
            CART,
            FlashNotifier(),
            add_to_cart=SimulatedAddToCart(settings.add_to_cart_delay),
            stock_policy=STOCK,
            price_resolver=PRICES,
            timeout=settings.add_to_cart_timeout,
        )
        WORKFLOWS[product.id] = wf
    return wf


def _product_or_404(product_id: int) -> Product:
    product = find_product(product_id)
    if product is None:
        raise HTTPException(status_code=404, detail=f"product {product_id} not found")
    return product


def _render(request: Request, name: str, ctx: Dict[str, Any]) -> HTMLResponse:
    base = {
        "cart_count": CART.count(),
        "message": request.query_params.get("msg", ""),
        "level": request.query_params.get("level", "success"),
    }
    base.update(ctx)
    return templates.TemplateResponse(request, name, base)


@app.get("/", response_class=HTMLResponse)
def index(request: Request):
    cards = []
    for p in list_products():
        wf = WORKFLOWS.get(p.id)
        cards.append(
            build_card_view(
                p,
                stock_policy=STOCK,
                price_resolver=PRICES,
                loading=wf.is_loading if wf else False,
            )
        )
    return _render(request, "index.html", {"cards": cards})


# ---------------- product card ----------------

@app.get("/product/{product_id}", response_class=HTMLResponse)
def product_detail(request: Request, product_id: int, variant: Optional[str] = None):
    product = _product_or_404(product_id)
    wf = WORKFLOWS.get(product.id)
    card = build_card_view(
        product,
        variant,
        stock_policy=STOCK,
        price_resolver=PRICES,
        loading=wf.is_loading if wf else False,
    )
    return _render(request, "product.html", {"card": card, "product": product})


@app.post("/product/{product_id}/cart")
async def product_add_to_cart(product_id: int, variant: str = Form("")):
    product = _product_or_404(product_id)
    wf = _workflow_for(product)

    result = await wf.submit(variant.strip() or None)
    query: Dict[str, str] = {}
    if variant.strip():
        query["variant"] = variant.strip()
    if result.ignored:
        query.update(msg=MSG_BUSY, level="info")
    else:
        notice = wf.notifier.pop()
        if notice is not None:
            query.update(msg=notice.message, level=notice.level)

    url = f"/product/{product.id}"
    if query:
        url = f"{url}?{urlencode(query)}"
    return RedirectResponse(url=url, status_code=303)


# ---------------- cart ----------------

@app.get("/cart", response_class=HTMLResponse)
def cart(request: Request):
    lines = [
        {
            "title": item.product.title,
            "product_id": item.product.id,
            "variant": item.selected_variant_name,
            "price": PRICES.format(item.variant_price),
        }
        for item in CART.items()
    ]
    return _render(request, "cart.html", {"lines": lines, "total": PRICES.format(CART.total())})
