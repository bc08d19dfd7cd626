from decimal import Decimal

# size ladder used when the catalog ships no variants: (id, name, surcharge)
DEFAULT_SIZES = (
    (1, "Small", Decimal("0")),
    (2, "Medium", Decimal("5")),
    (3, "Large", Decimal("10")),
)

TITLE_MAX_LENGTH = 50
RATING_STARS = 5

MSG_ADDED = "Added to cart!"
MSG_OUT_OF_STOCK = "Product is out of stock!"
MSG_SELECT_VARIANT = "Please select a variant!"
MSG_UNKNOWN_VARIANT = "Unknown variant: {name}"
MSG_ADD_FAILED = "Could not add to cart, please try again."
MSG_BUSY = "Still adding to cart, please wait..."

CURRENCY_SYMBOLS = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
    "UAH": "₴",
    "RUB": "₽",
}

# locale -> (group separator, decimal separator, pattern)
LOCALE_FORMATS = {
    "en-US": (",", ".", "{symbol}{amount}"),
    "en-GB": (",", ".", "{symbol}{amount}"),
    "de-DE": (".", ",", "{amount} {symbol}"),
    "fr-FR": (" ", ",", "{amount} {symbol}"),
    "uk-UA": (" ", ",", "{amount} {symbol}"),
    "ru-RU": (" ", ",", "{amount} {symbol}"),
}
DEFAULT_LOCALE = "en-US"

# stands in for the upstream catalog service
DEMO_PRODUCTS = [
    {
        "id": 1,
        "title": "Fjallraven - Foldsack No. 1 Backpack, Fits 15 Laptops",
        "price": "109.95",
        "originalPrice": "129.95",
        "discount": 15,
        "description": "Your perfect pack for everyday use and walks in the forest.",
        "category": "men's clothing",
        "image": "https://fakestoreapi.com/img/81fPKd-2AYL._AC_SL1500_.jpg",
        "rating": {"rate": "3.9", "count": 120},
    },
    {
        "id": 2,
        "title": "Mens Casual Premium Slim Fit T-Shirts",
        "price": "22.30",
        "description": "Slim-fitting style, contrast raglan long sleeve.",
        "category": "men's clothing",
        "image": "https://fakestoreapi.com/img/71-3HjGNDUL._AC_SY879._SX._UX._SY._UY_.jpg",
        "rating": {"rate": "4.1", "count": 259},
    },
    {
        "id": 3,
        "title": "Mens Cotton Jacket",
        "price": "55.99",
        "description": "Great outerwear jackets for Spring/Autumn/Winter.",
        "category": "men's clothing",
        "image": "https://fakestoreapi.com/img/71li-ujtlUL._AC_UX679_.jpg",
        "rating": {"rate": "4.7", "count": 500},
        "variants": [
            {"id": 1, "name": "Regular", "price": "55.99"},
            {"id": 2, "name": "Tall", "price": "59.99"},
        ],
    },
    {
        "id": 4,
        "title": "Mens Casual Slim Fit",
        "price": "15.99",
        "description": "The color could be slightly different between on the screen and in practice.",
        "category": "men's clothing",
        "image": "https://fakestoreapi.com/img/71YXzeOuslL._AC_UY879_.jpg",
        "rating": {"rate": "2.1", "count": 430},
    },
    {
        "id": 5,
        "title": "John Hardy Women's Legends Naga Gold & Silver Dragon Station Chain Bracelet",
        "price": "695",
        "description": "From our Legends Collection, the Naga was inspired by the mythical water dragon.",
        "category": "jewelery",
        "image": "https://fakestoreapi.com/img/71pWzhdJNwL._AC_UL640_QL65_ML3_.jpg",
        "rating": {"rate": "4.6", "count": 400},
        "variants": [
            {"id": 1, "name": "One Size", "price": "695"},
        ],
    },
    {
        "id": 7,
        "title": "White Gold Plated Princess",
        "price": "9.99",
        "originalPrice": "14.99",
        "discount": 33,
        "description": "Classic Created Wedding Engagement Solitaire Diamond Promise Ring.",
        "category": "jewelery",
        "image": "https://fakestoreapi.com/img/71YAIFU48IL._AC_UL640_QL65_ML3_.jpg",
        "rating": {"rate": "3", "count": 400},
    },
]
