import os

import requests

url = os.getenv("URL", "http://127.0.0.1:8000/")
params = {"n": 10}

response = requests.get(url, params=params, timeout=5)
print("✅ Ответ сервера:")
print(response.status_code, response.headers.get("content-type"))
print(response.text)
