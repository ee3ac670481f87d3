import requests

from site_deployer.reporting import DeploymentSummary, ServiceCheck, check_service


class FakeResponse:
    def __init__(self, status_code, reason):
        self.status_code = status_code
        self.reason = reason
        self.ok = status_code < 400


class FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.requests = []

    def get(self, url, timeout=None, allow_redirects=True):
        self.requests.append((url, timeout))
        if self.error is not None:
            raise self.error
        return self.response


def make_summary(**kwargs):
    return DeploymentSummary(
        address="203.0.113.5",
        ssh_user="ubuntu",
        ssh_key="ansible/ssh-key.pem",
        teardown="cd terraform && terraform destroy",
        **kwargs,
    )


def test_summary_lists_url_ssh_and_teardown(reporter, report_stream):
    reporter.report(make_summary())

    output = report_stream.getvalue()
    assert "Website URL  : http://203.0.113.5" in output
    assert "SSH access   : ssh -i ansible/ssh-key.pem ubuntu@203.0.113.5" in output
    assert "Destroy all  : cd terraform && terraform destroy" in output
    assert "HTTP check" not in output


def test_summary_includes_service_check(reporter, report_stream):
    check = ServiceCheck(url="http://203.0.113.5", ok=False, status_code=502, detail="Bad Gateway")

    reporter.report(make_summary(service_check=check))

    assert "HTTP check   : ⚠️ HTTP 502 Bad Gateway" in report_stream.getvalue()


def test_banner(reporter, report_stream):
    reporter.banner()

    lines = report_stream.getvalue().strip().splitlines()
    assert "Static Website Deployment" in lines[1]
    assert len({len(line) for line in lines}) == 1


def test_check_service_ok():
    session = FakeSession(response=FakeResponse(200, "OK"))

    check = check_service("http://203.0.113.5", timeout=3, session=session)

    assert check.ok
    assert check.describe() == "HTTP 200 OK"
    assert session.requests == [("http://203.0.113.5", 3)]


def test_check_service_connection_error_is_reported():
    session = FakeSession(error=requests.ConnectionError("connection refused"))

    check = check_service("http://203.0.113.5", session=session)

    assert not check.ok
    assert check.status_code is None
    assert "connection refused" in check.describe()
