"""
Search API routes.
"""

from typing import Optional, Union

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from hub3.api.dependencies import get_search_service
from hub3.api.schemas.search import EchoResponse, SearchResponse
from hub3.core.search.request import new_search_request
from hub3.core.services.search import SearchService

router = APIRouter()


@router.get("", response_model=Union[SearchResponse, EchoResponse])
def search(
    request: Request,
    echo: Optional[str] = Query(None, description="Return the compiled request instead of results"),
    service: SearchService = Depends(get_search_service),
):
    """
    Faceted search over fragment graphs.

    Accepts the hub3 search parameters (q, qf[], facet.field, rows, sortBy,
    byLeaf, ...). A scrollID or qs token resumes a previous search and
    overrides all other parameters.
    """
    params = {
        key: request.query_params.getlist(key)
        for key in request.query_params.keys()
        if key != "echo"
    }
    sr = new_search_request(params, service.config)

    if echo:
        try:
            value = service.echo(sr, echo)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        return EchoResponse(echo=echo, value=value)

    result = service.search(sr)
    return SearchResponse.from_result(result)
