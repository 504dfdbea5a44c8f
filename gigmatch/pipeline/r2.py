try:
    import boto3  # type: ignore
except ImportError:  # Optional; only needed for R2 upload/download
    boto3 = None

from gigmatch import config


def _r2_configured():
    return all([config.R2_ACCOUNT_ID, config.R2_ACCESS_KEY_ID, config.R2_SECRET_ACCESS_KEY])


def _r2_client():
    return boto3.client(
        "s3",
        endpoint_url=f"https://{config.R2_ACCOUNT_ID}.r2.cloudflarestorage.com",
        aws_access_key_id=config.R2_ACCESS_KEY_ID,
        aws_secret_access_key=config.R2_SECRET_ACCESS_KEY,
    )


def download_from_r2(key, local_path):
    """
    Download a file from R2 if it exists.
    Returns True if downloaded, False if not found or error.
    """
    if not boto3 or not _r2_configured():
        return False

    try:
        response = _r2_client().get_object(Bucket=config.R2_BUCKET_NAME, Key=key)
        local_path.parent.mkdir(parents=True, exist_ok=True)
        with open(local_path, "wb") as f:
            f.write(response["Body"].read())
        return True
    except Exception as e:
        print(f"  Warning: R2 download of {key} failed: {e}")
        return False


def upload_snapshot_to_r2(snapshot_path, log_func=None):
    """
    Upload a scrape snapshot to R2, both under its own name and as the
    latest copy that get_upcoming_shows() falls back to.
    Returns True if successful, False otherwise.
    """
    log = log_func or print

    if not boto3:
        log("R2 upload skipped: boto3 not installed")
        return False

    if not _r2_configured():
        log("R2 upload skipped: missing R2 credentials")
        return False

    try:
        s3 = _r2_client()
        with open(snapshot_path, "rb") as f:
            body = f.read()

        uploaded = []
        for key in (snapshot_path.name, config.R2_LATEST_KEY):
            s3.put_object(
                Bucket=config.R2_BUCKET_NAME,
                Key=key,
                Body=body,
                ContentType="application/json",
            )
            uploaded.append(key)

        log(f"Uploaded to R2: {', '.join(uploaded)}")
        return True
    except Exception as e:
        log(f"R2 upload failed: {e}")
        return False
