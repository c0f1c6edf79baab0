# portrait_studio/data/texts/vi.py
from portrait_studio.data.constants import AspectKey

from .dto import LocaleTexts, MessageTexts, SuggestionTexts

texts = LocaleTexts(
    suggestion=SuggestionTexts(
        characters="Một khung cảnh có {count} nhân vật.",
        aspect_prefixes={
            AspectKey.CLOTHING: "Mặc",
            AspectKey.BACKGROUND: "Bối cảnh là",
            AspectKey.VEHICLE: "Có một chiếc",
            AspectKey.CELEBRITY: "Đi cùng với",
            AspectKey.WEATHER: "Thời tiết là",
        },
        as_uploaded="như trong ảnh đã tải lên",
    ),
    messages=MessageTexts(
        progress="Đang tạo ảnh {current} trên {total}...",
        no_character_images="Vui lòng tải lên ít nhất một ảnh nhân vật.",
        busy="Đang có một yêu cầu tạo ảnh được xử lý.",
        rate_limited="Đã hết hạn ngạch API. Vui lòng đợi {seconds} giây trước khi thử lại.",
        unexpected_error="Đã xảy ra lỗi không mong muốn khi tạo ảnh.",
        background_removal_failed="Không thể xóa nền ảnh. Vui lòng thử lại.",
    ),
)
