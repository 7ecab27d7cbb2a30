"""模板管理器

维护当前页面使用的模板。页面可以先通过 set_active() 指定模板（例如分类配置的
模板），之后渲染阶段调用 load() 时不会被默认模板替换。

状态:
    空模板（id 0） --set_active(id)/load(id)--> 已加载(id)
    已加载        --set_active(0)-->           空模板（当前为默认模板时保持不变）
"""

from typing import Any, Dict, List, Mapping, Union

from ..exceptions import Err, ErrorCode
from ..log import get_logger
from .assignment import TemplateAssignment
from .source import TemplateSource

logger = get_logger()

DEFAULT_TEMPLATE_TEXT = "- Use default template -"


class TemplateManager:
    """模板管理器

    Args:
        source: 模板数据源
        default_text: 下拉列表中“使用默认模板”选项的文字

    使用示例:
        templates = TemplateManager(SqlTemplateSource(session_factory))

        templates.set_active(category.template_id)
        active = templates.load()
        positions = active.get_positions(["sidebar", "footer"])
    """

    def __init__(self, source: TemplateSource, default_text: str = DEFAULT_TEMPLATE_TEXT):
        self.source = source
        self.default_text = default_text
        self._active = TemplateAssignment()

    @classmethod
    def from_settings(cls, source: TemplateSource, settings) -> "TemplateManager":
        return cls(source, default_text=settings.default_template_text)

    def reset(self):
        self._active = TemplateAssignment()

    def get_active(self) -> TemplateAssignment:
        return self._active

    def set_active(self, value: Union[TemplateAssignment, int, None]):
        """设置当前模板

        传入模板对象时直接使用；传入 ID 时加载该模板；传入空值时重置为空模板，
        但当前模板是默认模板时保持不变。
        """
        if isinstance(value, TemplateAssignment):
            self._active = value
        elif value:
            self.load(value)
        elif not self._active.is_default:
            self.reset()

    def configure(self, data: Mapping[str, Any]) -> TemplateAssignment:
        """用一行模板数据构建模板并设为当前模板"""
        self._active = TemplateAssignment.from_data(data)
        return self._active

    def load(self, template_id: int = 0) -> TemplateAssignment:
        """加载模板

        未指定 ID 时：已有当前模板则直接返回，否则加载默认模板；没有默认模板时
        保持空模板。

        Raises:
            ResourceNotFoundException: 指定的模板不存在
        """
        template_id = int(template_id or 0)
        active = self._active

        if template_id and active.id == template_id:
            return active
        if not template_id and active.id:
            return active

        if template_id:
            data = self.source.fetch_by_id(template_id)
            if data is None:
                raise Err.not_found(
                    f"模板不存在: {template_id}",
                    code=ErrorCode.TEMPLATE_NOT_FOUND,
                    resource_id=template_id,
                )
        else:
            data = self.source.fetch_default()
            if data is None:
                logger.warning("没有设置默认模板，使用空模板")
                return active

        template = self.configure(data)
        logger.debug(f"已加载模板: {template.id} ({template.title})")
        return template

    def get_default(self) -> TemplateAssignment:
        """获取默认模板（不改变当前模板）

        Raises:
            NoDefaultException: 没有默认模板
        """
        data = self.source.fetch_default()
        if data is None:
            raise Err.no_default("未设置默认模板", resource_type="template")
        return TemplateAssignment.from_data(data)

    def get_templates(self) -> List[TemplateAssignment]:
        return [TemplateAssignment.from_data(row) for row in self.source.fetch_all()]

    def get_drop_down_list(self, enable_default: bool = True) -> Dict[int, str]:
        """下拉列表选项 {模板ID: 标题}，enable_default 时第一项为 ID 0 的默认选项"""
        options: Dict[int, str] = {}
        if enable_default:
            options[0] = self.default_text
        for template in self.get_templates():
            options[template.id] = template.title
        return options
