from app.schemas.trip import TripSnapshot, DateInterval, TripCreate, TripUpdate, TripResponse
from app.schemas.employee import EmployeeCreate, EmployeeResponse
from app.schemas.settings import RuleConfig, RuleSettingsUpdate, RuleSettingsResponse
from app.schemas.compliance import RiskTier, OverlapResult, ComplianceWindow, ForecastRequest, ForecastResult, SafeEntryResult
from app.schemas.report import EmployeeComplianceRow, ComplianceReport
