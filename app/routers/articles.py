from fastapi import APIRouter, Depends

from app.dependencies import ArticleListQuery, get_article_repository, get_list_query
from app.repository import ArticleRepository
from app.schemas import ArticleCreate, ArticleUpdate
from app.services import article_service

router = APIRouter(prefix="/api/v1/articles", tags=["articles"])

@router.get("")
async def list_articles(
    query: ArticleListQuery = Depends(get_list_query),
    repo: ArticleRepository = Depends(get_article_repository),
):
    return await article_service.get_articles(repo, query)

@router.get("/{article_id}")
async def get_article(article_id: str, repo: ArticleRepository = Depends(get_article_repository)):
    return await article_service.get_article(repo, article_id)

@router.post("", status_code=201)
async def create_article(data: ArticleCreate, repo: ArticleRepository = Depends(get_article_repository)):
    return await article_service.create_article(repo, data)

@router.put("/{article_id}")
async def update_article(
    article_id: str,
    data: ArticleUpdate,
    repo: ArticleRepository = Depends(get_article_repository),
):
    return await article_service.update_article(repo, article_id, data)

@router.delete("/{article_id}")
async def delete_article(article_id: str, repo: ArticleRepository = Depends(get_article_repository)):
    return await article_service.delete_article(repo, article_id)
