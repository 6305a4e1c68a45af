"""评论的创建、编辑与删除表单."""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar

from flask import flash, redirect, url_for
from flask_babel import get_locale, gettext
from markupsafe import Markup

from libreviews import db
from libreviews.constants import ErrorMessages, FlashCategory, FormAction, ReviewFormAction, SuccessMessages
from libreviews.forms.definitions.review import (
    ACTION_FIELD,
    LANGUAGE_FIELD,
    RATING_FIELD,
    REVIEW_FORM,
    REVIEW_FORM_KEY,
)
from libreviews.forms.submission import parse_submission
from libreviews.i18n.editor_messages import get_editor_messages
from libreviews.i18n.locale import is_supported
from libreviews.models.review import MAX_STAR_RATING, MIN_STAR_RATING
from libreviews.services.reviews import create_review, delete_review, get_review, update_review
from libreviews.utils import render
from libreviews.utils.mlstring import resolve
from libreviews.views.form_handler import FormContext, FormHandler

if TYPE_CHECKING:
    from libreviews.models.review import Review
    from libreviews.types import FormValues, RouteReturn

FORM_TEMPLATE = "reviews/form.html"
DELETE_TEMPLATE = "reviews/delete.html"


def _unescape(value: str | None) -> str:
    return Markup(value or "").unescape()


class ReviewFormHandler(FormHandler):
    """评论表单处理器.

    提交按钮 ``review-action`` 为 ``preview`` 时只渲染预览,
    为 ``publish`` 且校验通过时保存.
    """

    title_keys: ClassVar[dict[str, str]] = {
        FormAction.CREATE.value: "write a review",
        FormAction.EDIT.value: "edit review",
        FormAction.DELETE.value: "delete review",
    }

    def load_data(self, ctx: FormContext) -> Review:
        return get_review(ctx.resource_id, include_deleted=True)

    # ------------------------------------------------------------------ #
    # create
    # ------------------------------------------------------------------ #
    def create_get(self, ctx: FormContext, review: Review | None = None) -> RouteReturn:
        language = self._content_language(ctx)
        return self._render_form(ctx, form_data={"language": language})

    def create_post(self, ctx: FormContext, review: Review | None = None) -> RouteReturn:
        language = self._content_language(ctx)
        result = parse_submission(ctx.request.form, form_def=REVIEW_FORM, form_key=REVIEW_FORM_KEY, language=language)
        values = result.form_values
        is_valid = all([result.is_valid, values.get("url") is not None, self._validate_rating(values)])

        if not is_valid or self._is_preview(ctx):
            return self._render_form(ctx, form_data=self._submitted_data(ctx, language), values=values, language=language)

        new_review = create_review(values, ctx.user, language)
        db.session.commit()
        flash(gettext(SuccessMessages.REVIEW_CREATED), FlashCategory.PAGE_MESSAGES)
        return redirect(url_for("reviews.show_review", review_id=new_review.id))

    # ------------------------------------------------------------------ #
    # edit
    # ------------------------------------------------------------------ #
    def edit_get(self, ctx: FormContext, review: Review) -> RouteReturn:
        language = self._content_language(ctx, fallback=review.original_language)
        form_data = {
            "url": review.url,
            "title": _unescape(resolve(review.title, language)),
            "text": _unescape(resolve(review.text, language)),
            "rating": str(review.star_rating),
            "language": language,
        }
        return self._render_form(ctx, form_data=form_data, review=review)

    def edit_post(self, ctx: FormContext, review: Review) -> RouteReturn:
        language = self._content_language(ctx, fallback=review.original_language)
        result = parse_submission(ctx.request.form, form_def=REVIEW_FORM, form_key=REVIEW_FORM_KEY, language=language)
        values = result.form_values
        is_valid = all([result.is_valid, values.get("url") is not None, self._validate_rating(values)])

        if not is_valid or self._is_preview(ctx):
            return self._render_form(
                ctx,
                form_data=self._submitted_data(ctx, language),
                values=values,
                language=language,
                review=review,
            )

        update_review(review, values, language, user=ctx.user)
        db.session.commit()
        flash(gettext(SuccessMessages.REVIEW_UPDATED), FlashCategory.PAGE_MESSAGES)
        return redirect(url_for("reviews.show_review", review_id=review.id))

    # ------------------------------------------------------------------ #
    # delete
    # ------------------------------------------------------------------ #
    def delete_get(self, ctx: FormContext, review: Review) -> RouteReturn:
        return render.template(DELETE_TEMPLATE, title_key=ctx.title_key, review=review)

    def delete_post(self, ctx: FormContext, review: Review) -> RouteReturn:
        result = parse_submission(ctx.request.form, form_def=(), language=self._content_language(ctx))
        if not result.is_valid:
            return render.template(DELETE_TEMPLATE, title_key=ctx.title_key, review=review)

        delete_review(review, ctx.user)
        db.session.commit()
        flash(gettext(SuccessMessages.REVIEW_DELETED), FlashCategory.PAGE_MESSAGES)
        return redirect(url_for("main.index"))

    # ------------------------------------------------------------------ #
    # helpers
    # ------------------------------------------------------------------ #
    @staticmethod
    def _content_language(ctx: FormContext, *, fallback: str | None = None) -> str:
        """内容语言: 表单/查询参数中的 review-language,其次 fallback,最后界面语言."""
        requested = ctx.request.values.get(LANGUAGE_FIELD)
        if is_supported(requested):
            return requested
        if is_supported(fallback):
            return fallback
        return str(get_locale())

    @staticmethod
    def _is_preview(ctx: FormContext) -> bool:
        return ctx.request.form.get(ACTION_FIELD) != ReviewFormAction.PUBLISH.value

    @staticmethod
    def _validate_rating(values: FormValues) -> bool:
        rating = values.get("star_rating")
        if rating is None:
            return False
        if not isinstance(rating, int) or not MIN_STAR_RATING <= rating <= MAX_STAR_RATING:
            flash(gettext(ErrorMessages.INVALID_FIELD, field=RATING_FIELD), FlashCategory.PAGE_ERRORS)
            return False
        return True

    @staticmethod
    def _submitted_data(ctx: FormContext, language: str) -> dict[str, str]:
        form = ctx.request.form
        return {
            "url": form.get("review-url", ""),
            "title": form.get("review-title", ""),
            "text": form.get("review-text", ""),
            "rating": form.get(RATING_FIELD, ""),
            "language": language,
        }

    def _render_form(
        self,
        ctx: FormContext,
        *,
        form_data: dict[str, str],
        values: FormValues | None = None,
        language: str | None = None,
        review: Review | None = None,
    ) -> RouteReturn:
        preview_html = None
        if values and language and isinstance(values.get("html"), dict):
            preview_html = values["html"].get(language)
        return render.template(
            FORM_TEMPLATE,
            title_key=ctx.title_key,
            form_action=ctx.action,
            form_data=form_data,
            preview_html=Markup(preview_html) if preview_html else None,
            review=review,
            editor_messages=get_editor_messages(),
            rating_range=range(MIN_STAR_RATING, MAX_STAR_RATING + 1),
        )


__all__ = ["ReviewFormHandler"]
