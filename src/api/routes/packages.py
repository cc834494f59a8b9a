from uuid import UUID

from fastapi import APIRouter, Depends, Request
from starlette.datastructures import FormData

from src.adapters.clock import SystemClock
from src.adapters.fs.filestore import FileSystemImageStore
from src.adapters.sqlite.repos import SQLitePackageRepo, SQLitePackageTypeRepo
from src.api.deps import (
    get_clock,
    get_current_user,
    get_image_store,
    get_package_repo,
    get_package_type_repo,
    get_policy,
    get_rules,
    get_upload_policy,
    require_permission,
)
from src.api.errors import raise_for_errors
from src.api.forms import form_fields, is_checked, read_form, read_uploads
from src.api.listing import fetch_page
from src.api.schemas import PackageResponse, PageResponse, SuccessResponse
from src.components.media.models import UploadPolicy
from src.components.packages import (
    PACKAGE_LISTING,
    CreatePackageInput,
    DeletePackageInput,
    GetPackageInput,
    KeptImage,
    NewImage,
    UpdatePackageInput,
    run_create,
    run_delete,
    run_get,
    run_update,
)
from src.domain.entities import User
from src.domain.policy import PolicyEngine
from src.rules.models import Rules

router = APIRouter()

# Multipart key -> PackageForm field
PACKAGE_FORM_FIELDS = {
    "code": "code",
    "title": "title",
    "description": "description",
    "location": "location",
    "price": "price",
    "startDate": "start_date",
    "endDate": "end_date",
    "maxGuests": "max_guests",
    "dormitories": "dormitories",
    "suites": "suites",
    "bathrooms": "bathrooms",
    "numberOfDays": "number_of_days",
    "status": "status",
    "typeId": "type_id",
}


def _new_images(form: FormData) -> list[NewImage]:
    return [
        NewImage(upload=upload, is_main=is_checked(form.get(f"imageIsMain{index}")))
        for index, upload in read_uploads(form, "images")
    ]


def _kept_images(form: FormData) -> list[KeptImage]:
    kept = []
    for url in form.getlist("existingImages"):
        if isinstance(url, str) and url:
            is_main = is_checked(form.get(f"existingImageIsMain{url}"))
            kept.append(KeptImage(url=url, is_main=is_main))
    return kept


@router.get("", response_model=PageResponse[PackageResponse])
def list_packages(
    request: Request,
    current_user: User = Depends(get_current_user),
    repo: SQLitePackageRepo = Depends(get_package_repo),
    policy: PolicyEngine = Depends(get_policy),
    rules: Rules = Depends(get_rules),
) -> PageResponse[PackageResponse]:
    """Paginated, filterable package list for the back office."""
    require_permission(current_user, policy, "packages:read")

    page = fetch_page(request.query_params, PACKAGE_LISTING, repo=repo, rules=rules)
    return PageResponse.from_page(page, [PackageResponse.model_validate(p) for p in page.items])


@router.get("/{package_id}", response_model=PackageResponse)
def get_package(
    package_id: UUID,
    current_user: User = Depends(get_current_user),
    repo: SQLitePackageRepo = Depends(get_package_repo),
    policy: PolicyEngine = Depends(get_policy),
) -> PackageResponse:
    require_permission(current_user, policy, "packages:read")

    result = run_get(GetPackageInput(package_id=package_id), repo=repo)
    if not result.success or result.package is None:
        raise_for_errors(result.errors)
    return PackageResponse.model_validate(result.package)


@router.post("", response_model=PackageResponse, status_code=201)
def create_package(
    form: FormData = Depends(read_form),
    current_user: User = Depends(get_current_user),
    repo: SQLitePackageRepo = Depends(get_package_repo),
    type_repo: SQLitePackageTypeRepo = Depends(get_package_type_repo),
    storage: FileSystemImageStore = Depends(get_image_store),
    clock: SystemClock = Depends(get_clock),
    upload_policy: UploadPolicy = Depends(get_upload_policy),
    policy: PolicyEngine = Depends(get_policy),
    rules: Rules = Depends(get_rules),
) -> PackageResponse:
    require_permission(current_user, policy, "packages:create")

    inp = CreatePackageInput(
        fields=form_fields(form, PACKAGE_FORM_FIELDS),
        new_images=_new_images(form),
    )
    result = run_create(
        inp,
        repo=repo,
        type_repo=type_repo,
        storage=storage,
        time=clock,
        upload_policy=upload_policy,
        storage_timeout=rules.timeouts.storage_seconds,
    )
    if not result.success or result.package is None:
        raise_for_errors(result.errors, fallback="Invalid package data")
    return PackageResponse.model_validate(result.package)


@router.put("/{package_id}", response_model=PackageResponse)
def update_package(
    package_id: UUID,
    form: FormData = Depends(read_form),
    current_user: User = Depends(get_current_user),
    repo: SQLitePackageRepo = Depends(get_package_repo),
    type_repo: SQLitePackageTypeRepo = Depends(get_package_type_repo),
    storage: FileSystemImageStore = Depends(get_image_store),
    clock: SystemClock = Depends(get_clock),
    upload_policy: UploadPolicy = Depends(get_upload_policy),
    policy: PolicyEngine = Depends(get_policy),
    rules: Rules = Depends(get_rules),
) -> PackageResponse:
    require_permission(current_user, policy, "packages:edit")

    inp = UpdatePackageInput(
        package_id=package_id,
        fields=form_fields(form, PACKAGE_FORM_FIELDS),
        new_images=_new_images(form),
        kept_images=_kept_images(form),
    )
    result = run_update(
        inp,
        repo=repo,
        type_repo=type_repo,
        storage=storage,
        time=clock,
        upload_policy=upload_policy,
        storage_timeout=rules.timeouts.storage_seconds,
    )
    if not result.success or result.package is None:
        raise_for_errors(result.errors, fallback="Invalid package data")
    return PackageResponse.model_validate(result.package)


@router.delete("/{package_id}", response_model=SuccessResponse)
def delete_package(
    package_id: UUID,
    current_user: User = Depends(get_current_user),
    repo: SQLitePackageRepo = Depends(get_package_repo),
    storage: FileSystemImageStore = Depends(get_image_store),
    policy: PolicyEngine = Depends(get_policy),
    rules: Rules = Depends(get_rules),
) -> SuccessResponse:
    require_permission(current_user, policy, "packages:delete")

    result = run_delete(
        DeletePackageInput(package_id=package_id),
        repo=repo,
        storage=storage,
        storage_timeout=rules.timeouts.storage_seconds,
    )
    if not result.success:
        raise_for_errors(result.errors)
    return SuccessResponse()
