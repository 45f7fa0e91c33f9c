SECRET_NAME_PREFIX = "fio-token-"


def secret_name_for(account: str) -> str:
    return f"{SECRET_NAME_PREFIX}{account}"


def blob_name_for(account: str, start_date: str, end_date: str) -> str:
    # {account}/transactions_{start}_{end}.json
    return f"{account}/transactions_{start_date}_{end_date}.json"
