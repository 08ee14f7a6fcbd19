"""Default city registry: the 22 administrative regions of Taiwan."""

CWA_API_BASE_URL = "https://opendata.cwa.gov.tw/api"
FORECAST_DATASET_ID = "F-C0032-001"  # 36-hour county forecast

# Legacy /api/weather/kaohsiung route resolves to this name.
KAOHSIUNG = "高雄市"

DEFAULT_CITIES: list[str] = [
    "基隆市",
    "臺北市",
    "新北市",
    "桃園市",
    "新竹縣",
    "新竹市",
    "苗栗縣",
    "臺中市",
    "彰化縣",
    "南投縣",
    "雲林縣",
    "嘉義縣",
    "嘉義市",
    "臺南市",
    KAOHSIUNG,
    "屏東縣",
    "宜蘭縣",
    "花蓮縣",
    "臺東縣",
    "金門縣",
    "澎湖縣",
    "連江縣",
]
