"""PDF export of business reports using ReportLab."""

import logging
from io import BytesIO
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import cm
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.cidfonts import UnicodeCIDFont
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from backend.app.schemas.report import HTMLReport

logger = logging.getLogger(__name__)


class PDFGenerator:
    """Render an HTMLReport's structured content as a PDF document."""

    def __init__(self):
        # Built-in CID font, always available in ReportLab
        pdfmetrics.registerFont(UnicodeCIDFont("HeiseiKakuGo-W5"))
        self.japanese_font = "HeiseiKakuGo-W5"

        styles = getSampleStyleSheet()
        self.title_style = ParagraphStyle(
            "ReportTitle",
            parent=styles["Heading1"],
            fontName=self.japanese_font,
            fontSize=22,
            textColor=colors.HexColor("#2c3e50"),
            spaceAfter=20,
            alignment=TA_CENTER,
        )
        self.heading_style = ParagraphStyle(
            "ReportHeading",
            parent=styles["Heading2"],
            fontName=self.japanese_font,
            fontSize=16,
            textColor=colors.HexColor("#2980b9"),
            spaceBefore=18,
            spaceAfter=10,
        )
        self.body_style = ParagraphStyle(
            "ReportBody",
            parent=styles["BodyText"],
            fontName=self.japanese_font,
            fontSize=10.5,
            leading=18,
        )

    def _paragraph(self, text: str) -> Paragraph:
        return Paragraph(escape(text), self.body_style)

    def _bullets(self, items: list[str], empty: str = "特記事項なし") -> list:
        if not items:
            return [self._paragraph(empty)]
        return [self._paragraph(f"・{item}") for item in items]

    def _table(self, rows: list[list[str]]) -> Table:
        table = Table(rows, hAlign="LEFT")
        table.setStyle(TableStyle([
            ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#3498db")),
            ("TEXTCOLOR", (0, 0), (-1, 0), colors.whitesmoke),
            ("FONTNAME", (0, 0), (-1, -1), self.japanese_font),
            ("FONTSIZE", (0, 0), (-1, -1), 10),
            ("BOTTOMPADDING", (0, 0), (-1, 0), 8),
            ("BACKGROUND", (0, 1), (-1, -1), colors.beige),
            ("GRID", (0, 0), (-1, -1), 1, colors.grey),
        ]))
        return table

    def report_to_pdf(self, report: HTMLReport) -> bytes:
        """
        Convert a report to PDF.

        Args:
            report: Generated business report

        Returns:
            PDF file as bytes
        """
        buffer = BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=A4,
            rightMargin=2 * cm,
            leftMargin=2 * cm,
            topMargin=2 * cm,
            bottomMargin=2 * cm,
            title=report.title,
        )

        summary = report.summary
        model = report.business_model
        market = report.market_analysis
        synergy = report.synergy
        plan = report.validation_plan

        story = [Paragraph(escape(report.title), self.title_style), Spacer(1, 12)]

        story.append(Paragraph("エグゼクティブサマリー", self.heading_style))
        story.append(self._paragraph(summary.executive))
        story.append(Spacer(1, 6))
        story.append(self._table([
            ["1年目", "3年目", "5年目"],
            [
                summary.estimated_revenue.year1.formatted,
                summary.estimated_revenue.year3.formatted,
                summary.estimated_revenue.year5.formatted,
            ],
        ]))

        story.append(Paragraph("ビジネスモデル", self.heading_style))
        story.append(self._paragraph(model.overview))
        story.append(self._paragraph(f"価値提案: {model.value_proposition.core}"))
        story.extend(self._bullets(model.customer_segments, "顧客セグメントは未設定です。"))
        story.append(Spacer(1, 6))
        story.append(self._table([
            ["固定費", "変動費", "損益分岐点"],
            [model.cost_structure.fixed.formatted, model.cost_structure.variable.formatted,
             model.cost_structure.break_even_point],
        ]))

        story.append(Paragraph("市場分析", self.heading_style))
        story.append(self._table([
            ["TAM", "PAM", "SAM", "成長率"],
            [market.market_size.tam.formatted, market.market_size.pam.formatted,
             market.market_size.sam.formatted, f"{market.growth_rate:g}%"],
        ]))
        story.append(Spacer(1, 6))
        story.extend(self._bullets(market.trends, "トレンド情報は現在収集中です。"))

        story.append(Paragraph("シナジー分析", self.heading_style))
        story.append(self._paragraph(f"シナジースコア: {synergy.overall_score:g}点 ({synergy.grade})"))
        if synergy.strategic_fit:
            story.append(self._paragraph(synergy.strategic_fit))
        story.extend(self._bullets(synergy.recommendations))

        story.append(Paragraph("検証計画", self.heading_style))
        story.append(self._table(
            [["フェーズ", "期間", "予算"]]
            + [[f"{p.phase}. {p.name}", p.duration, p.budget.formatted] for p in plan.phases]
        ))
        story.append(Spacer(1, 6))
        story.append(self._paragraph(f"総期間: {plan.timeline} / 必要予算: {plan.total_budget.formatted}"))

        logger.info(f"[PDF] Building PDF document for report {report.id}")
        doc.build(story)

        pdf_bytes = buffer.getvalue()
        buffer.close()

        logger.info(f"[PDF] PDF generated successfully ({len(pdf_bytes)} bytes)")
        return pdf_bytes
