from datetime import timezone

from portal.errors import FailureKind, PermissionDenied
from portal.schemas import (
    AuthResult,
    DashboardStats,
    ListResult,
    Notice,
    Poll,
    Resident,
    Session,
    VisitorCreate,
    VisitorPassRead,
)
from portal.services.community import search_residents


def test_session_display_name_prefers_name():
    s = Session(identifier="admin@greenavenue.com", name="Admin User")
    assert s.display_name == "Admin User"


def test_session_display_name_falls_back_to_email_local_part():
    assert Session(identifier="rahul@email.com").display_name == "rahul"


def test_session_display_name_phone_identifier():
    assert Session(identifier="9876543211").display_name == "9876543211"
    assert Session(identifier="9876543211", email="rahul@email.com").display_name == "rahul"


def test_session_from_directory_user_normalises():
    s = Session.from_directory_user("priya@email.com", {"role": "Owner", "site": 3, "phone": 9876543212})
    assert s.identifier == "priya@email.com"
    assert s.name == "priya"
    assert s.site == "3"
    assert s.phone == "9876543212"
    assert s.email == "priya@email.com"
    assert not s.is_admin


def test_session_is_admin_case_insensitive():
    assert Session(identifier="x", role="ADMIN").is_admin
    assert Session(identifier="x", role="admin").is_admin
    assert not Session(identifier="x", role="Tenant").is_admin


def test_session_to_directory_user():
    s = Session(identifier="9876543210", name="Admin User", role="Admin", site="1", phone="9876543210", email="admin@greenavenue.com")
    assert s.to_directory_user() == {
        "email": "admin@greenavenue.com", "name": "Admin User", "role": "Admin", "site": "1", "phone": "9876543210",
    }


def test_visitor_create_defaults():
    v = VisitorCreate(name="John", phone="9999999999", visit_date="2024-12-28")
    assert v.purpose == ""


def test_visitor_pass_reads_wire_names_and_numbers():
    row = {
        "ID": 7, "VisitorName": "John Doe", "VisitorPhone": 9999999999, "VisitDate": "2024-12-28",
        "OTP": 123456, "OTPExpiry": "2024-12-29T10:00:00.000Z", "Status": "Pending", "SiteNumber": 1,
        "otpExpired": True,
    }
    p = VisitorPassRead.model_validate(row)
    assert p.id == "7"
    assert p.otp == "123456"
    assert p.visitor_phone == "9999999999"
    assert p.site == "1"
    assert p.otp_expiry.tzinfo is not None
    # Server-side flag is ignored; validity is computed on read
    assert p.expired is False


def test_visitor_pass_naive_expiry_is_utc():
    p = VisitorPassRead.model_validate({"VisitorName": "A", "OTP": "111111", "OTPExpiry": "2024-12-29T10:00:00"})
    assert p.otp_expiry.tzinfo == timezone.utc


def test_notice_aliases():
    n = Notice.model_validate({"ID": 1, "Type": "Event", "Title": "Party", "Message": "m", "PostedBy": "a", "PostedAt": "b"})
    assert n.id == "1"
    assert n.type == "Event"


def test_poll_share():
    poll = Poll.model_validate({"ID": "1", "Question": "Q", "options": ["Yes", "No"], "votes": {"Yes": 25, "No": 15}, "totalVotes": 40})
    assert poll.share("Yes") == 62.5
    assert poll.share("Maybe") == 0.0
    assert Poll(question="Empty").share("Yes") == 0.0


def test_dashboard_stats_aliases():
    stats = DashboardStats.model_validate({"totalResidents": 139, "pendingVisitors": 5})
    assert stats.total_residents == 139
    assert stats.pending_visitors == 5
    assert stats.open_requests == 0


def test_failed_result_fields():
    r = AuthResult.failed("Invalid credentials")
    assert r.success is False
    assert r.failure is FailureKind.REJECTED
    assert not r.retryable
    t = ListResult[Notice].failed("Connection error", kind=FailureKind.TRANSPORT)
    assert t.retryable
    assert t.data == []


def test_search_residents():
    residents = [
        Resident(site="2", name="Rahul Sharma", phone="9876543211"),
        Resident(site="15", name="Priya Singh", phone="9876543212"),
    ]
    assert [r.name for r in search_residents(residents, "rahul")] == ["Rahul Sharma"]
    assert [r.name for r in search_residents(residents, "15")] == ["Priya Singh"]
    assert [r.name for r in search_residents(residents, "3212")] == ["Priya Singh"]
    assert len(search_residents(residents, "")) == 2


def test_failed_result_from_permission_error():
    r = ListResult[Notice].failed(PermissionDenied("Admin access required"))
    assert r.message == "Admin access required"
    assert r.failure is FailureKind.REJECTED


def test_visitor_pass_numeric_text_cells():
    p = VisitorPassRead.model_validate({
        "VisitorName": 42, "VisitDate": 20241228, "Purpose": 7, "Status": None,
        "OTP": 123456, "OTPExpiry": "2024-12-29T10:00:00Z",
    })
    assert p.visitor_name == "42"
    assert p.visit_date == "20241228"
    assert p.purpose == "7"
    assert p.status == ""
