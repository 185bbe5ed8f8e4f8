from fastapi import FastAPI

from bizquiz.routers.companies import router as companies_router
from bizquiz.routers.pricing import router as pricing_router
from bizquiz.routers.questions import router as questions_router
from bizquiz.routers.scrape import router as scrape_router

app = FastAPI(title="Bizquiz API")

app.include_router(scrape_router)
app.include_router(questions_router)
app.include_router(pricing_router)
app.include_router(companies_router)

@app.get("/")
def root():
    return {"message": "API is running!"}
