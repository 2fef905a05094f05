"""Shared CLI parameter definitions.

Every command talks to the same bucket, so the S3 connection options are
declared once here as annotated types and reused in each command signature:

    @app.command()
    def my_command(
        path: PathArgument,
        bucket: BucketOption,
        region: RegionOption = "us-east-1",
    ):
        pass
"""

from typing import Annotated, Optional

import typer

PathArgument = Annotated[
    str, typer.Argument(help="Path relative to the media root, or a bucket URL")
]

BucketOption = Annotated[
    str, typer.Option("--bucket", "-b", help="S3 bucket name", envvar="BUCKETFS_BUCKET")
]

RegionOption = Annotated[
    str,
    typer.Option(
        "--region", help="AWS region name (e.g. eu-west-1)", envvar="BUCKETFS_REGION"
    ),
]

MediaRootOption = Annotated[
    Optional[str],
    typer.Option(
        "--media-root",
        help="Key prefix under which files are stored",
        envvar="BUCKETFS_MEDIA_ROOT",
    ),
]

HttpsOption = Annotated[
    bool, typer.Option("--https/--http", help="Scheme used for generated URLs")
]

AccessKeyIdOption = Annotated[
    Optional[str], typer.Option("--access-key-id", help="AWS access key ID")
]

SecretAccessKeyOption = Annotated[
    Optional[str], typer.Option("--secret-access-key", help="AWS secret access key")
]

SessionTokenOption = Annotated[
    Optional[str], typer.Option("--session-token", help="AWS session token")
]

EndpointUrlOption = Annotated[
    Optional[str], typer.Option("--endpoint-url", help="Custom S3 endpoint URL")
]

AwsProfileOption = Annotated[
    Optional[str], typer.Option("--aws-profile", help="AWS CLI profile name")
]
