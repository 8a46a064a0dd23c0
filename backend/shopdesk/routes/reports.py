# Overview: Flask API routes for reports, dashboard figures and CSV export.

from flask import Blueprint, Response, jsonify, request

from ..decorators import require_auth
from ..services import export_service, reporting_service
from ..services.shop_service import get_shop


reports_bp = Blueprint("reports", __name__, url_prefix="/api/reports")


def _requested_range(shop) -> tuple[str, str, str]:
    return reporting_service.resolve_range(
        today=shop.today(),
        preset=request.args.get("preset"),
        start=request.args.get("start"),
        end=request.args.get("end"),
    )


@reports_bp.get("/summary")
@require_auth
def summary_report():
    """
    Financial report for a preset or custom range.

    Query params: preset (Today, Yesterday, This Week, Last Week, This Month,
    Last Month, This Year) or start/end (YYYY-MM-DD). Default: This Month.
    """
    shop = get_shop()
    try:
        start, end, preset = _requested_range(shop)
        report = reporting_service.build_report(
            shop.sales.list(),
            shop.expenses.list(),
            start=start,
            end=end,
            preset=preset,
        )
        return jsonify(report), 200
    except reporting_service.ReportError as exc:
        return jsonify({"error": str(exc)}), 400


@reports_bp.get("/monthly")
@require_auth
def monthly_report():
    shop = get_shop()
    current_year = shop.today().year
    year = request.args.get("year", current_year, type=int)
    sales = shop.sales.list()
    return jsonify({
        "year": year,
        "years": reporting_service.sales_years(sales, current_year),
        "months": reporting_service.monthly_series(sales, year),
    }), 200


@reports_bp.get("/dashboard")
@require_auth
def dashboard_report():
    shop = get_shop()
    return jsonify(reporting_service.dashboard(
        shop.products.list(),
        shop.sales.list(),
        shop.expenses.list(),
        today=shop.today(),
        low_stock_threshold=shop.low_stock_threshold,
    )), 200


@reports_bp.get("/export.csv")
@require_auth
def export_report():
    shop = get_shop()
    try:
        start, end, _preset = _requested_range(shop)
        if start > end:
            raise reporting_service.ReportError("start must be on or before end")
    except reporting_service.ReportError as exc:
        return jsonify({"error": str(exc)}), 400

    csv_text = export_service.export_report_csv(
        reporting_service.filter_by_date(shop.sales.list(), start, end),
        reporting_service.filter_by_date(shop.expenses.list(), start, end),
    )
    filename = export_service.export_filename(start, end)
    return Response(
        csv_text,
        mimetype="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
