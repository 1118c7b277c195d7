from rest_framework import serializers


class LoginSerializer(serializers.Serializer):
    email = serializers.CharField(required=False, allow_blank=True)
    password = serializers.CharField(required=False, allow_blank=True, trim_whitespace=False)

    def validate_email(self, v):
        return (v or '').strip().lower()

    def validate(self, attrs):
        if not attrs.get('email') or not attrs.get('password'):
            raise serializers.ValidationError('missing_fields', code='missing_fields')
        return attrs


class UserSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    email = serializers.EmailField()
    firstName = serializers.CharField(source='first_name')
    lastName = serializers.CharField(source='last_name')
    role = serializers.CharField()
    avatar = serializers.CharField()
    isActive = serializers.BooleanField(source='is_active')
    lastLogin = serializers.DateTimeField(source='last_login', allow_null=True)
