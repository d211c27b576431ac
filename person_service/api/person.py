"""
Person API endpoints
"""

from fastapi import APIRouter, Depends, Query, Response, status

from person_service.core.errors import ErrorResponseModel
from person_service.dependencies.person import get_person_service
from person_service.models.person import Person
from person_service.services.person import PersonService

router = APIRouter()


@router.post(
    "/person",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={400: {"model": ErrorResponseModel}, 500: {"model": ErrorResponseModel}},
)
async def create_person(
    person: Person,
    service: PersonService = Depends(get_person_service),
):
    """
    Publish a person for asynchronous persistence.

    Returns 204 once the record is accepted by the message broker. The record
    becomes readable after the stream consumer has stored it.
    """
    await service.create_person(person)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/person",
    response_model=Person,
    responses={404: {"description": "No person stored under this email"}},
)
async def get_person(
    email: str = Query(..., min_length=1, description="Email of the person to fetch"),
    service: PersonService = Depends(get_person_service),
):
    """
    Get a person by email. Returns 404 with an empty body when not found.
    """
    person = await service.get_person(email)
    if person is None:
        return Response(status_code=status.HTTP_404_NOT_FOUND)
    return person
