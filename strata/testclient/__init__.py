from strata.testclient.utils import override_settings as override_settings
