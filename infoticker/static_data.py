"""
Static lookup tables: weather cities and the default financial datasets
used when the AI source cannot provide them.
"""
from types import MappingProxyType

from .models import (
    ForexData, FuelPrices, GoldData, GoldPrices, PriceData, StockData,
)

CITIES_FOR_WEATHER = (
    "Hà Nội", "TP. Hồ Chí Minh", "Đà Nẵng", "Hải Phòng", "Cần Thơ",
    "Thanh Hóa", "Vinh", "Nha Trang", "Quy Nhơn", "Huế",
    "Đà Lạt", "Buôn Ma Thuột", "Pleiku", "Biên Hòa", "Thủ Dầu Một",
    "Vũng Tàu", "Mỹ Tho", "Long Xuyên", "Rạch Giá", "Cà Mau",
    "Hạ Long", "Thái Nguyên", "Nam Định", "Việt Trì", "Phú Quốc",
)

# (latitude, longitude)
CITY_COORDINATES = MappingProxyType({
    "Hà Nội": (21.0285, 105.8542),
    "TP. Hồ Chí Minh": (10.7769, 106.7009),
    "Đà Nẵng": (16.0545, 108.2022),
    "Hải Phòng": (20.8458, 106.6881),
    "Cần Thơ": (10.0452, 105.7469),
    "Thanh Hóa": (19.8005, 105.7796),
    "Vinh": (18.6752, 105.6942),
    "Nha Trang": (12.2388, 109.1967),
    "Quy Nhơn": (13.7808, 109.2223),
    "Huế": (16.4637, 107.5909),
    "Đà Lạt": (11.9404, 108.4583),
    "Buôn Ma Thuột": (12.6683, 108.0436),
    "Pleiku": (13.9785, 108.0023),
    "Biên Hòa": (10.9576, 106.8432),
    "Thủ Dầu Một": (11.0069, 106.6631),
    "Vũng Tàu": (10.3458, 107.0843),
    "Mỹ Tho": (10.3592, 106.3533),
    "Long Xuyên": (10.3807, 105.4243),
    "Rạch Giá": (10.0125, 105.0825),
    "Cà Mau": (9.1764, 105.1531),
    "Hạ Long": (20.9575, 107.0758),
    "Thái Nguyên": (21.5928, 105.8442),
    "Nam Định": (20.4344, 106.1771),
    "Việt Trì": (21.3121, 105.3940),
    "Phú Quốc": (10.2288, 103.9574),
})

FALLBACK_VIETNAM_STOCKS = (
    StockData('VN-INDEX', 1280.00, -2.50, -0.20),
    StockData('HNX-INDEX', 245.00, 0.75, 0.31),
    StockData('UPCOM', 98.50, 0.25, 0.25),
)

FALLBACK_WORLD_STOCKS = (
    StockData('DOW JONES', 39000.00, -150.00, -0.38),
    StockData('S&P 500', 5400.00, -10.00, -0.18),
    StockData('NIKKEI 225', 38500.00, 250.00, 0.65),
)

FALLBACK_FOREX = (
    ForexData('USD', 25300, 25470),
    ForexData('EUR', 26800, 27100),
    ForexData('JPY', 158.00, 161.00),
)

FALLBACK_GOLD = GoldPrices(
    domestic=(
        GoldData('VÀNG SJC', 90500000, 92500000),
        GoldData('VÀNG 9999', 75000000, 76500000),
    ),
    world=(PriceData('GOLD', 2350.55),),
)

FALLBACK_FUEL = FuelPrices(
    domestic=(
        PriceData('RON95-V', 23540),
        PriceData('E5 RON92', 22750),
        PriceData('DẦU DO', 20990),
    ),
    world=(
        PriceData('BRENT', 82.75),
        PriceData('WTI', 78.50),
    ),
)
