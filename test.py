import requests

response = requests.post(
    "http://localhost:8000/scrape",
    json={"url": "https://www.python.org/about/"},
    timeout=60,
)

print(f"status:  {response.status_code}")

if response.status_code == 200:
    data = response.json()
    print(f"title:   {data['title']}")
    print(f"words:   {data['word_count']}")
    print(f"chars:   {len(data['content'])}")
    print(f"source:  {data['source_url']}")
    print(f"preview: {data['content'][:200]}")
else:
    print(response.text)
