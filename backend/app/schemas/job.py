from pydantic import BaseModel


class JobCreate(BaseModel):
    title: str | None = None
    description: str | None = None
    category: str | None = None
    budget_min: float | None = None
    budget_max: float | None = None
    deadline: str | None = None  # ISO date or datetime string


class JobUpdate(BaseModel):
    title: str | None = None
    description: str | None = None
    category: str | None = None
    budget_min: float | None = None
    budget_max: float | None = None
    deadline: str | None = None
    status: str | None = None  # only CANCELLED is accepted here


class SelectFreelancerRequest(BaseModel):
    freelancerId: int | None = None
    freelancer_id: int | None = None  # snake_case alias accepted too

    @property
    def chosen_id(self) -> int | None:
        return self.freelancerId if self.freelancerId is not None else self.freelancer_id


class CompleteJobRequest(BaseModel):
    rating: float | None = None
    comment: str | None = None
