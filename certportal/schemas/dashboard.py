from pydantic import BaseModel


class DashboardStats(BaseModel):
    students: int
    eligible_students: int
    approved_certificates: int
    courses: int
    colleges: int
    companies: int
    templates: int
    companies_with_templates: int
