"""Local REST backend serving scripts/db.json.

Answers the same routes as json-server:

    uvicorn scripts.dev_backend:app --port 3000
"""

import json
from pathlib import Path

from fastapi import FastAPI, HTTPException

DB_PATH = Path(__file__).with_name("db.json")

app = FastAPI(title="User Graph dev backend")


def load_db() -> dict:
    """Read the JSON store."""
    with DB_PATH.open(encoding="utf-8") as f:
        return json.load(f)


def find(collection: str, record_id: str) -> dict:
    for record in load_db()[collection]:
        if str(record["id"]) == record_id:
            return record
    raise HTTPException(status_code=404, detail=f"{collection}/{record_id} not found")


@app.get("/users/{user_id}")
async def get_user(user_id: str) -> dict:
    return find("users", user_id)


@app.get("/companies/{company_id}")
async def get_company(company_id: str) -> dict:
    return find("companies", company_id)


@app.get("/companies/{company_id}/users")
async def get_company_users(company_id: str) -> list[dict]:
    """Users whose companyId matches, in file order."""
    return [user for user in load_db()["users"] if str(user.get("companyId")) == company_id]
