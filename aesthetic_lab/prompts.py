from google.genai import types

ANALYSIS_PROMPT = """
你是一位拥有20年临床经验的顶级资深整形外科医生及高级面部美学架构师。你现在收到了用户三张不同角度的照片：正脸、侧面（90度）、45度斜侧位。
请结合这三个维度的视觉信息，进行极度专业、严谨且具有医学深度的全方位美学解构。

你的分析任务必须包含以下细节：
1. **正脸分析 (Frontal)**：深度解构“三庭五眼”垂直与水平比例，分析面部对称性、眉眼间距、中面部平整度。
2. **侧面分析 (Lateral)**：重点评估“四高三低”曲线。精确分析鼻唇角（理想90-105°）、额头丰满度、鼻尖表现点、以及下颌缘清晰度与Ricketts E-line（审美平面）。
3. **45度侧位分析 (Oblique)**：观察面部软组织容量分布、苹果肌高点（Malar Mound）、泪沟深度、中面部饱满度及面部光影衔接。
4. **医学级建议**：提供“医美级”手术（如：内眦赘皮矫正术、膨体/硅胶假体植入）及非手术类注射（如：玻尿酸MD Codes动力位点提升、肉毒素咬肌调整）方案。建议必须具备临床参考价值。

输出语言：简体中文。请务必提供极具洞察力的医学级总结，语言风格需专业、理性。
"""


def _number():
    return types.Schema(type=types.Type.NUMBER)


def _string():
    return types.Schema(type=types.Type.STRING)


def _string_list():
    return types.Schema(type=types.Type.ARRAY, items=_string())


def _object(properties, required):
    return types.Schema(type=types.Type.OBJECT, properties=properties, required=required)


# Mirrors models.FacialAnalysisReport; medicalBeauty is the only optional field
RESPONSE_SCHEMA = _object(
    {
        "overallScore": _number(),
        "proportions": _object(
            {
                "threeParts": _object(
                    {
                        "upper": _number(),
                        "middle": _number(),
                        "lower": _number(),
                        "description": _string(),
                    },
                    ["upper", "middle", "lower", "description"],
                ),
                "fiveEyes": _object(
                    {
                        "leftSide": _number(),
                        "leftEye": _number(),
                        "middle": _number(),
                        "rightEye": _number(),
                        "rightSide": _number(),
                        "description": _string(),
                    },
                    ["leftSide", "leftEye", "middle", "rightEye", "rightSide", "description"],
                ),
            },
            ["threeParts", "fiveEyes"],
        ),
        "features": _object(
            {
                "eyes": _string(),
                "nose": _string(),
                "lips": _string(),
                "jawline": _string(),
            },
            ["eyes", "nose", "lips", "jawline"],
        ),
        "suggestions": _object(
            {
                "medicalBeauty": _string_list(),
                "makeup": _string_list(),
                "lifestyle": _string_list(),
            },
            ["makeup", "lifestyle"],
        ),
        "summary": _string(),
    },
    ["overallScore", "proportions", "features", "suggestions", "summary"],
)
